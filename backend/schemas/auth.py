from pydantic import BaseModel


class AuthUserRead(BaseModel):
    id: str
    email: str
    role: str


class AuthCheckResponse(BaseModel):
    authenticated: bool
    user: AuthUserRead | None = None
