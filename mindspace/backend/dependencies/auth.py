from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from mindspace.backend.core.errors import Unauthorized
from mindspace.backend.core.tokens import InvalidToken, user_id_from_claims, verify_access_token
from mindspace.backend.models.user import User
from mindspace.db.session import get_session

_security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    """Identity resolved from a verified bearer token, handed to route functions."""
    user_id: int
    username: str
    token: str


def bearer_token(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(_security),
) -> Optional[str]:
    if creds is None or creds.scheme.lower() != "bearer" or not creds.credentials:
        return None
    return creds.credentials


def get_current_user(
    token: Optional[str] = Depends(bearer_token),
    db: Session = Depends(get_session),
) -> AuthContext:
    """Strict auth dependency; raises Unauthorized when no/invalid token."""
    if not token:
        raise Unauthorized("No token provided")
    try:
        payload = verify_access_token(token)
    except InvalidToken:
        raise Unauthorized("Invalid or expired token")

    user = db.get(User, user_id_from_claims(payload))
    if user is None or not user.is_active:
        raise Unauthorized("Invalid or expired token")
    return AuthContext(user_id=user.id, username=user.username, token=token)
