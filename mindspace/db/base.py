"""Centralized SQLModel imports to ensure metadata is populated."""

from mindspace.backend.models import user as _user  # noqa: F401
from mindspace.backend.models import user_session as _user_session  # noqa: F401
from mindspace.backend.models import chat as _chat  # noqa: F401
from mindspace.backend.models import mood as _mood  # noqa: F401
