"""sw_payments REST API — payment history and single payment status reads."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from src.sw_common.response import ApiResponse, success_response
from src.sw_gateway.session import WalletSession, get_session
from src.sw_payments.domain.models import Payment

router = APIRouter(prefix="/payments", tags=["payments"])


def _payment_dict(payment: Payment) -> dict:
    return {
        "id": payment.id,
        "status": payment.status.value,
        "is_terminal": payment.is_terminal,
        "amount": str(payment.amount),
        "currency": payment.currency,
        "method": payment.method,
        "type": payment.type,
        "description": payment.description,
        "failure_reason": payment.failure_reason,
        "created_at": payment.created_at.isoformat() if payment.created_at else None,
    }


@router.get("/history")
async def payment_history(
    session: Annotated[WalletSession, Depends(get_session)],
    request: Request,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> ApiResponse:
    payments, total = await session.payments.get_payment_history(limit=limit, offset=offset)
    data = {
        "payments": [_payment_dict(p) for p in payments],
        "total": total,
        "limit": limit,
        "offset": offset,
    }
    return success_response(data, request)


@router.get("/{payment_id}/status")
async def payment_status(
    payment_id: str,
    session: Annotated[WalletSession, Depends(get_session)],
    request: Request,
) -> ApiResponse:
    payment = await session.payments.check_status(payment_id)
    return success_response(_payment_dict(payment), request)
