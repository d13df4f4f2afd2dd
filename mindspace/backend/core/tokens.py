from __future__ import annotations

import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from jose import jwt, JWTError

from mindspace.backend.core.clock import utcnow
from mindspace.backend.core.config import settings

# ← python-jose 사용


class InvalidToken(Exception):
    """Signature, expiry or claim check failed."""


# ---- 공통 ----
def _utcnow() -> datetime:
    return utcnow()


def _exp_in(days: int = 0, minutes: int = 0) -> datetime:
    return _utcnow() + timedelta(days=days, minutes=minutes)


def _make_jwt(payload: Dict[str, Any], exp: datetime) -> str:
    to_encode = payload.copy()
    to_encode["iat"] = int(_utcnow().timestamp())
    to_encode["exp"] = int(exp.timestamp())
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def _decode(token: str) -> Dict[str, Any]:
    # jose.jwt.decode는 검증 실패 시 jose.exceptions.JWTError를 던짐
    return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])


# ---- Access Token ----
def create_access_token(
    user_id: int,
    username: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    exp = _utcnow() + expires_delta if expires_delta else _exp_in(days=settings.jwt_expire_days)
    payload = {"sub": str(user_id), "username": username, "typ": "access"}
    return _make_jwt(payload, exp)


def verify_access_token(token: str) -> Dict[str, Any]:
    try:
        payload = _decode(token)
    except JWTError as e:
        raise InvalidToken(str(e)) from e
    if payload.get("typ") != "access":
        raise InvalidToken("Invalid token type")
    sub = payload.get("sub")
    if not sub or not str(sub).isdigit():
        raise InvalidToken("Missing sub")
    return payload


def decode_access_token(token: str):
    """verify_access_token 의 관대한 버전. 실패 시 None."""
    try:
        return verify_access_token(token)
    except InvalidToken:
        return None


def user_id_from_claims(payload: Dict[str, Any]) -> int:
    return int(payload["sub"])


# ---- 세션 레코드 ----
def new_session_id() -> str:
    return str(uuid.uuid4())
