from pydantic import BaseModel


class RegisterRequest(BaseModel):
    username: str
    email: str
    password: str


class LoginRequest(BaseModel):
    email: str
    password: str


class UserSummary(BaseModel):
    id: int
    username: str
    email: str


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserSummary


class VerifyResponse(BaseModel):
    valid: bool = True
    user: UserSummary


class MessageResponse(BaseModel):
    message: str
