"""sw_wallet REST API — reconciled ledger view, summary and refresh trigger."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from src.sw_common.enums import DirectionFilter, TransactionCategory
from src.sw_common.response import ApiResponse, success_response
from src.sw_gateway.session import WalletSession, get_session
from src.sw_wallet.application.schemas import LedgerQuery

router = APIRouter(prefix="/wallet", tags=["wallet"])


@router.post("/refresh")
async def refresh(
    session: Annotated[WalletSession, Depends(get_session)],
    request: Request,
) -> ApiResponse:
    state = await session.ledger.refresh()
    data = {
        "wallet_id": state.wallet.id,
        "count": len(state.transactions),
        "refreshed_at": state.refreshed_at.isoformat(),
    }
    return success_response(data, request)


@router.get("/transactions")
async def list_transactions(
    session: Annotated[WalletSession, Depends(get_session)],
    request: Request,
    direction: DirectionFilter = Query(DirectionFilter.ALL, description="all | in | out"),
    category: TransactionCategory | None = Query(None, description="Semantic bucket"),
    q: str = Query("", max_length=200, description="Case-insensitive search"),
) -> ApiResponse:
    query = LedgerQuery(direction=direction, category=category, q=q)
    data = await session.ledger.get_view(query)
    return success_response(data.model_dump(mode="json"), request)


@router.get("/summary")
async def summary(
    session: Annotated[WalletSession, Depends(get_session)],
    request: Request,
) -> ApiResponse:
    data = await session.ledger.get_summary()
    return success_response(data.model_dump(mode="json"), request)
