"""Authentication schemas."""

from pydantic import Field

from adaptive_chat.schemas.base import BaseSchema
from adaptive_chat.schemas.user import Password, UserRead


class LoginRequest(BaseSchema):
    """Email/password login. Fields are optional so blanks map to a 400 from the service."""

    email: str | None = None
    password: Password | None = None


class LoginResponse(BaseSchema):
    """Response schema for successful authentication."""

    message: str = "Login successful"
    token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Token expiry in seconds")
    user: UserRead
