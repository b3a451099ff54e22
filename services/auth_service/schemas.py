from pydantic import BaseModel, EmailStr

from shared.security import ActorRole


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: ActorRole


class SessionResponse(BaseModel):
    user_id: str
    role: ActorRole
