from __future__ import annotations

import logging
from datetime import timedelta
from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from mindspace.backend.core.clock import utcnow
from mindspace.backend.core.config import settings
from mindspace.backend.core.errors import (
    Conflict,
    NotFound,
    Unauthorized,
    ValidationError,
    field_error,
)
from mindspace.backend.core.security import (
    email_problem,
    hash_password,
    password_problem,
    username_problem,
    verify_password,
)
from mindspace.backend.core.tokens import (
    InvalidToken,
    create_access_token,
    decode_access_token,
    new_session_id,
    user_id_from_claims,
    verify_access_token,
)
from mindspace.backend.models.chat import ChatMessage
from mindspace.backend.models.mood import MoodEntry
from mindspace.backend.models.user import User
from mindspace.backend.models.user_session import UserSession
from mindspace.backend.schemas.user import ProfileUpdate

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
INVALID_SESSION = "Invalid or expired session"


def _profile(user: User) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "created_at": user.created_at,
        "last_login": user.last_login,
    }


class AccountService:
    """Registration, login sessions and profile management for one DB session."""

    def __init__(self, db: Session, session_ttl_days: Optional[int] = None):
        self.db = db
        self.session_ttl_days = session_ttl_days or settings.session_ttl_days

    # ──────────────────────────────────────────────────────────────────────
    # 내부 헬퍼

    def _get_user(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    def _open_session(self, user: User) -> UserSession:
        row = UserSession(
            user_id=user.id,
            session_id=new_session_id(),
            expires_at=utcnow() + timedelta(days=self.session_ttl_days),
        )
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row

    def _issue(self, user: User) -> dict:
        token = create_access_token(user.id, user.username)
        self._open_session(user)
        return {"token": token, "user": user.summary()}

    def _taken_by_other(self, user_id: Optional[int], username=None, email=None) -> bool:
        conds = []
        if username is not None:
            conds.append(User.username == username)
        if email is not None:
            conds.append(User.email == email)
        if not conds:
            return False
        stmt = select(User.id).where(or_(*conds))
        if user_id is not None:
            stmt = stmt.where(User.id != user_id)
        return self.db.exec(stmt).first() is not None

    # ──────────────────────────────────────────────────────────────────────
    # 공개 API

    def register(self, username: str, email: str, password: str) -> dict:
        problems = []
        for field, problem in (
            ("username", username_problem(username)),
            ("email", email_problem(email)),
            ("password", password_problem(password)),
        ):
            if problem:
                problems.append(field_error(field, problem))
        if problems:
            raise ValidationError(details=problems)

        if self._taken_by_other(None, username=username, email=email):
            raise Conflict("User already exists with this email or username")

        user = User(username=username, email=email, password_hash=hash_password(password))
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # check-then-insert 사이의 경쟁: 저장소 유니크 위반도 409로
            self.db.rollback()
            raise Conflict("User already exists with this email or username")
        self.db.refresh(user)

        logger.info("user registered: id=%s", user.id)
        return self._issue(user)

    def login(self, email: str, password: str) -> dict:
        problems = []
        if email_problem(email or ""):
            problems.append(field_error("email", "Please provide a valid email address"))
        if not password:
            problems.append(field_error("password", "Password is required"))
        if problems:
            raise ValidationError(details=problems)

        user = self.db.exec(select(User).where(User.email == email)).first()
        # 존재하지 않는 이메일과 비밀번호 불일치는 같은 메시지 (계정 열거 방지)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("login failed")
            raise Unauthorized(INVALID_CREDENTIALS)
        if not user.is_active:
            raise Unauthorized("Account is deactivated")

        user.last_login = utcnow()
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)

        logger.info("user logged in: id=%s", user.id)
        return self._issue(user)

    def logout(self, token: Optional[str]) -> None:
        """Best effort: an unreadable token simply does nothing."""
        claims = decode_access_token(token) if token else None
        if claims is None:
            return
        user_id = user_id_from_claims(claims)
        for row in self.db.exec(
            select(UserSession).where(
                UserSession.user_id == user_id,
                UserSession.is_active == True,  # noqa: E712
            )
        ):
            row.is_active = False
        self.db.commit()
        logger.info("user logged out: id=%s", user_id)

    def verify_session(self, token: Optional[str]) -> dict:
        if not token:
            raise Unauthorized("No token provided")
        try:
            claims = verify_access_token(token)
        except InvalidToken:
            raise Unauthorized("Invalid token")

        stmt = (
            select(User)
            .join(UserSession, UserSession.user_id == User.id)
            .where(
                User.id == user_id_from_claims(claims),
                User.is_active == True,  # noqa: E712
                UserSession.is_active == True,  # noqa: E712
                UserSession.expires_at > utcnow(),
            )
        )
        user = self.db.exec(stmt).first()
        if user is None:
            raise Unauthorized(INVALID_SESSION)
        return user.summary()

    def get_profile(self, user_id: int) -> dict:
        return _profile(self._get_user(user_id))

    def update_profile(self, user_id: int, payload: ProfileUpdate) -> dict:
        changes = payload.changes()

        problems = []
        for field, value in changes.items():
            if value is None:
                problems.append(field_error(field, f"{field} cannot be null"))
                continue
            check = username_problem if field == "username" else email_problem
            problem = check(value)
            if problem:
                problems.append(field_error(field, problem))
        if problems:
            raise ValidationError(details=problems)

        user = self._get_user(user_id)
        if changes and self._taken_by_other(
            user_id, username=changes.get("username"), email=changes.get("email")
        ):
            raise Conflict("Username or email already exists")

        for field, value in changes.items():
            setattr(user, field, value)
        user.updated_at = utcnow()
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise Conflict("Username or email already exists")
        self.db.refresh(user)
        return _profile(user)

    def change_password(self, user_id: int, current_password: str, new_password: str) -> None:
        problem = password_problem(new_password)
        if problem:
            raise ValidationError(details=[field_error("newPassword", problem)])

        user = self._get_user(user_id)
        if not verify_password(current_password, user.password_hash):
            raise Unauthorized("Current password is incorrect")

        user.password_hash = hash_password(new_password)
        user.updated_at = utcnow()
        self.db.add(user)
        self.db.commit()
        logger.info("password changed: id=%s", user_id)

    def delete_account(self, user_id: int) -> None:
        user = self._get_user(user_id)
        self.db.delete(user)
        self.db.commit()
        # 채팅/무드/세션 레코드는 FK ON DELETE CASCADE로 함께 삭제됨
        logger.info("account deleted: id=%s", user_id)

    def get_stats(self, user_id: int) -> dict:
        user = self._get_user(user_id)
        week_ago = utcnow() - timedelta(days=7)

        total_messages, total_sessions, last_message = self.db.exec(
            select(
                func.count(ChatMessage.id),
                func.count(func.distinct(ChatMessage.session_id)),
                func.max(ChatMessage.timestamp),
            ).where(ChatMessage.user_id == user_id)
        ).one()
        total_entries, avg_mood, last_entry = self.db.exec(
            select(
                func.count(MoodEntry.id),
                func.avg(MoodEntry.mood_score),
                func.max(MoodEntry.timestamp),
            ).where(MoodEntry.user_id == user_id)
        ).one()
        messages_week = self.db.exec(
            select(func.count(ChatMessage.id)).where(
                ChatMessage.user_id == user_id, ChatMessage.timestamp >= week_ago
            )
        ).one()
        entries_week = self.db.exec(
            select(func.count(MoodEntry.id)).where(
                MoodEntry.user_id == user_id, MoodEntry.timestamp >= week_ago
            )
        ).one()

        return {
            "chat": {
                "totalMessages": total_messages or 0,
                "totalSessions": total_sessions or 0,
                "lastMessageTime": last_message,
            },
            "mood": {
                "totalEntries": total_entries or 0,
                "averageMood": float(avg_mood or 0),
                "lastEntryTime": last_entry,
            },
            "activity": {
                "joinedAt": user.created_at,
                "lastLogin": user.last_login,
                "messagesThisWeek": messages_week or 0,
                "moodEntriesThisWeek": entries_week or 0,
            },
        }
