from pydantic import BaseModel
from datetime import datetime


class SignUpRequest(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""


class SignInRequest(BaseModel):
    email: str = ""
    password: str = ""
    remember: bool = False


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
