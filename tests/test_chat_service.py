from datetime import timedelta

import pytest
from sqlmodel import select

from mindspace.backend.core.clock import utcnow
from mindspace.backend.core.errors import ValidationError
from mindspace.backend.models.chat import ChatMessage, Sender
from mindspace.backend.models.user import User
from mindspace.backend.services.chat_service import ChatService
from mindspace.backend.services.llm_service import FALLBACK_REPLY


@pytest.fixture
def users(db):
    rows = [
        User(username="alice01", email="a@x.com", password_hash="x"),
        User(username="bob_02", email="b@x.com", password_hash="x"),
    ]
    for row in rows:
        db.add(row)
    db.commit()
    return [row.id for row in rows]


def _chat(db, reply="I hear you."):
    prompts = []

    def complete(prompt):
        prompts.append(prompt)
        return reply

    return ChatService(db, complete=complete), prompts


def test_send_and_respond_stores_pair(db, users):
    chat, prompts = _chat(db)

    user_msg, ai_msg = chat.send_and_respond(users[0], "s1", "I feel anxious today")

    assert prompts == ["I feel anxious today"]
    assert (user_msg.sender, ai_msg.sender) == (Sender.user.value, Sender.ai.value)
    assert ai_msg.content == "I hear you."
    assert user_msg.session_id == ai_msg.session_id == "s1"
    assert [m.id for m in chat.get_history(users[0])] == [user_msg.id, ai_msg.id]


def test_send_and_respond_falls_back_when_provider_raises(db, users):
    def broken(prompt):
        raise ConnectionError("provider down")

    chat = ChatService(db, complete=broken)

    _, ai_msg = chat.send_and_respond(users[0], None, "hello")

    assert ai_msg.content == FALLBACK_REPLY
    assert len(chat.get_history(users[0])) == 2


def test_send_and_respond_falls_back_on_blank_reply(db, users):
    chat, _ = _chat(db, reply="   ")

    _, ai_msg = chat.send_and_respond(users[0], None, "hello")

    assert ai_msg.content == FALLBACK_REPLY


@pytest.mark.parametrize("content", ["", "   "])
def test_send_and_respond_rejects_blank_content(db, users, content):
    chat, prompts = _chat(db)

    with pytest.raises(ValidationError):
        chat.send_and_respond(users[0], None, content)

    assert prompts == []
    assert db.exec(select(ChatMessage)).all() == []


def test_history_filters_by_session_and_owner(db, users):
    chat, _ = _chat(db)
    chat.append_message(users[0], "s1", "user", "one")
    chat.append_message(users[0], "s2", "user", "two")
    chat.append_message(users[1], "s1", "user", "bob's")

    assert [m.content for m in chat.get_history(users[0])] == ["one", "two"]
    assert [m.content for m in chat.get_history(users[0], "s1")] == ["one"]
    assert [m.content for m in chat.get_history(users[1])] == ["bob's"]


def test_append_message_rejects_unknown_sender(db, users):
    chat, _ = _chat(db)

    with pytest.raises(ValueError):
        chat.append_message(users[0], None, "system", "nope")


def test_list_sessions_orders_by_latest_activity(db, users):
    now = utcnow()
    uid = users[0]
    db.add(ChatMessage(user_id=uid, session_id="old", sender="user", content="a", timestamp=now - timedelta(hours=3)))
    db.add(ChatMessage(user_id=uid, session_id="old", sender="ai", content="b", timestamp=now - timedelta(hours=2)))
    db.add(ChatMessage(user_id=uid, session_id="new", sender="user", content="c", timestamp=now - timedelta(hours=1)))
    db.add(ChatMessage(user_id=uid, session_id=None, sender="user", content="d", timestamp=now))
    db.commit()
    chat, _ = _chat(db)

    sessions = chat.list_sessions(uid)

    assert [s["session_id"] for s in sessions] == ["new", "old"]
    assert sessions[1]["message_count"] == 2
    assert sessions[1]["start_time"] == now - timedelta(hours=3)


def test_delete_message_only_touches_own_rows(db, users):
    chat, _ = _chat(db)
    msg = chat.append_message(users[0], None, "user", "mine")

    assert chat.delete_message(users[1], msg.id) == {"message": "Message not found"}
    assert chat.delete_message(users[0], msg.id) == {"message": "Message deleted successfully"}
    assert chat.delete_message(users[0], msg.id) == {"message": "Message not found"}


def test_clear_history_is_idempotent_and_scoped(db, users):
    chat, _ = _chat(db)
    chat.append_message(users[0], "s1", "user", "one")
    chat.append_message(users[0], "s2", "user", "two")
    chat.append_message(users[1], "s1", "user", "bob's")

    chat.clear_history(users[0], "s1")
    assert [m.content for m in chat.get_history(users[0])] == ["two"]

    chat.clear_history(users[0])
    result = chat.clear_history(users[0])

    assert result == {"message": "Chat history cleared successfully"}
    assert chat.get_history(users[0]) == []
    assert len(chat.get_history(users[1])) == 1
