from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ProfileUpdate(BaseModel):
    """
    Partial profile update.
    Fields the client leaves out stay untouched (see ``model_fields_set``);
    an explicit null is rejected by the service.
    """
    username: Optional[str] = None
    email: Optional[str] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class PasswordChange(BaseModel):
    current_password: str = Field(alias="currentPassword")
    new_password: str = Field(alias="newPassword")

    model_config = ConfigDict(populate_by_name=True)


class ProfileRead(BaseModel):
    id: int
    username: str
    email: str
    created_at: datetime
    last_login: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)


class ProfileResponse(BaseModel):
    message: Optional[str] = None
    user: ProfileRead
