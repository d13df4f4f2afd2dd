from fastapi import Depends
from sqlmodel import Session

from mindspace.backend.services.account_service import AccountService
from mindspace.backend.services.chat_service import ChatService
from mindspace.backend.services.llm_service import CompletionProvider, generate_supportive_reply
from mindspace.backend.services.mood_service import MoodService
from mindspace.db.session import get_session


def get_completion_provider() -> CompletionProvider:
    return generate_supportive_reply


def get_account_service(db: Session = Depends(get_session)) -> AccountService:
    return AccountService(db)


def get_chat_service(
    db: Session = Depends(get_session),
    complete: CompletionProvider = Depends(get_completion_provider),
) -> ChatService:
    return ChatService(db, complete=complete)


def get_mood_service(db: Session = Depends(get_session)) -> MoodService:
    return MoodService(db)
