"""sw_gateway REST API — session login/logout against the remote service."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from src.sw_common.response import ApiResponse, success_response
from src.sw_gateway.session import WalletSession, get_session

router = APIRouter(prefix="/session", tags=["session"])


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=1, max_length=128)


@router.post("/login")
async def login(
    body: LoginRequest,
    session: Annotated[WalletSession, Depends(get_session)],
    request: Request,
) -> ApiResponse:
    data = await session.login(body.email, body.password)
    return success_response(data, request)


@router.post("/logout")
async def logout(
    session: Annotated[WalletSession, Depends(get_session)],
    request: Request,
) -> ApiResponse:
    await session.logout()
    return success_response(None, request)
