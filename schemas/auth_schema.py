from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginUser(BaseModel):
    username: str
    profile_pic: str | None = Field(default=None, serialization_alias="profilePic")


class LoginResponse(BaseModel):
    message: str = "Login successful"
    user: LoginUser


class TokenUser(BaseModel):
    """Identity decoded from a session token."""

    id: str
    username: str
