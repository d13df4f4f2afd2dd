from typing import Optional

from fastapi import APIRouter, Depends, status

from mindspace.backend.dependencies.auth import bearer_token
from mindspace.backend.dependencies.services import get_account_service
from mindspace.backend.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    VerifyResponse,
)
from mindspace.backend.services.account_service import AccountService

auth_router = APIRouter(prefix="/auth", tags=["auth"])


@auth_router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    accounts: AccountService = Depends(get_account_service),
):
    result = accounts.register(body.username, body.email, body.password)
    return AuthResponse(message="User registered successfully", **result)


@auth_router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    accounts: AccountService = Depends(get_account_service),
):
    result = accounts.login(body.email, body.password)
    return AuthResponse(message="Login successful", **result)


@auth_router.post("/logout", response_model=MessageResponse)
def logout(
    token: Optional[str] = Depends(bearer_token),
    accounts: AccountService = Depends(get_account_service),
):
    """
    모든 활성 세션 레코드 무효화.
    이미 발급된 JWT는 만료 전까지 유효함 (stateless 토큰).
    """
    accounts.logout(token)
    return MessageResponse(message="Logout successful")


@auth_router.get("/verify", response_model=VerifyResponse)
def verify(
    token: Optional[str] = Depends(bearer_token),
    accounts: AccountService = Depends(get_account_service),
):
    return VerifyResponse(valid=True, user=accounts.verify_session(token))
