#anandayojan/utils/auth
from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from typing import Optional

from ..config import settings

# Constants
SECRET_KEY = settings.secret_key
ALGORITHM = settings.algorithm
ACCESS_TOKEN_EXPIRE_MINUTES = settings.access_token_expire_minutes

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)

def user_type_for(email: str) -> str:
    admins = {e.strip().lower() for e in settings.admin_emails}
    return "admin" if email.lower() in admins else "customer"

def issue_access_token(user_id: str, email: str, name: str, picture: Optional[str] = None) -> str:
    """Session token for a signed-in user; admins are listed in ADMIN_EMAILS."""
    claims = {
        "sub": user_id,
        "email": email,
        "name": name,
        "type": user_type_for(email)
    }
    if picture:
        claims["picture"] = picture
    return create_access_token(claims)

async def get_current_user(token: str = Depends(oauth2_scheme)) -> dict:
    """Get the current authenticated user from JWT token"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(
            token,
            SECRET_KEY,
            algorithms=[ALGORITHM]
        )
        user_id: str = payload.get("sub")
        user_type: str = payload.get("type")
        if user_id is None or user_type not in ("customer", "admin"):
            raise credentials_exception
    except JWTError:
        raise credentials_exception

    return {
        "id": user_id,
        "email": payload.get("email", ""),
        "name": payload.get("name", ""),
        "picture": payload.get("picture"),
        "type": user_type
    }

async def require_admin(current_user: dict = Depends(get_current_user)) -> dict:
    if current_user["type"] != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return current_user

__all__ = [
    "oauth2_scheme",
    "verify_password",
    "get_password_hash",
    "create_access_token",
    "issue_access_token",
    "user_type_for",
    "get_current_user",
    "require_admin",
    "ACCESS_TOKEN_EXPIRE_MINUTES"
]
