# anandayojan/models/auth.py
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from datetime import datetime
from typing import Optional

class UserOut(BaseModel):
    id: str
    email: str
    name: str
    picture: Optional[str] = None

class AuthResponse(BaseModel):
    token: str
    user: UserOut

class MeResponse(BaseModel):
    user: UserOut

class SignupRequest(BaseModel):
    email: EmailStr
    password: str
    name: str

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class GoogleAuthRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id_token: Optional[str] = Field(None, alias="idToken")

class IdentityUser(BaseModel):
    id: str
    email: str
    name: str = ""
    picture: Optional[str] = None

class User(BaseModel):
    id: str
    email: EmailStr
    name: str
    password_hash: str
    created_at: datetime
