from fastapi import APIRouter, Depends

from mindspace.backend.dependencies.auth import AuthContext, get_current_user
from mindspace.backend.dependencies.services import get_account_service
from mindspace.backend.schemas.auth import MessageResponse
from mindspace.backend.schemas.user import PasswordChange, ProfileResponse, ProfileUpdate
from mindspace.backend.services.account_service import AccountService

user_router = APIRouter(prefix="/user", tags=["user"])


@user_router.get("/profile", response_model=ProfileResponse)
def get_profile(
    auth: AuthContext = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
):
    return ProfileResponse(user=accounts.get_profile(auth.user_id))


@user_router.put("/profile", response_model=ProfileResponse)
def update_profile(
    body: ProfileUpdate,
    auth: AuthContext = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
):
    user = accounts.update_profile(auth.user_id, body)
    return ProfileResponse(message="Profile updated successfully", user=user)


@user_router.put("/password", response_model=MessageResponse)
def change_password(
    body: PasswordChange,
    auth: AuthContext = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
):
    accounts.change_password(auth.user_id, body.current_password, body.new_password)
    return MessageResponse(message="Password changed successfully")


@user_router.get("/stats")
def get_stats(
    auth: AuthContext = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
):
    return accounts.get_stats(auth.user_id)


@user_router.delete("/account", response_model=MessageResponse)
def delete_account(
    auth: AuthContext = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
):
    accounts.delete_account(auth.user_id)
    return MessageResponse(message="Account deleted successfully")
