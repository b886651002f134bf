# anandayojan/routes/auth.py
import logging
from datetime import datetime, timezone
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, status

from ..dependencies import get_user_store
from ..errors import InvalidIdentityToken, UpstreamUnavailable
from ..models.auth import (
    AuthResponse,
    GoogleAuthRequest,
    LoginRequest,
    MeResponse,
    SignupRequest,
    User,
    UserOut
)
from ..services import get_identity_verifier
from ..stores import UserStore
from ..utils.auth import (
    get_current_user,
    get_password_hash,
    issue_access_token,
    verify_password
)

logger = logging.getLogger(__name__)

auth_router = APIRouter(prefix="/auth", tags=["Authentication"])

MIN_PASSWORD_LENGTH = 6


@auth_router.post("/google", response_model=AuthResponse)
async def google_sign_in(
    payload: GoogleAuthRequest,
    verifier=Depends(get_identity_verifier)
):
    if not payload.id_token:
        raise HTTPException(status_code=400, detail="idToken is required")

    try:
        identity = await verifier.verify_identity_token(payload.id_token)
    except InvalidIdentityToken:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication failed",
        )
    except UpstreamUnavailable:
        raise HTTPException(status_code=502, detail="Google sign-in is temporarily unavailable")

    logger.info(f"Google sign-in for {identity.email}")
    token = issue_access_token(identity.id, identity.email, identity.name, identity.picture)
    return AuthResponse(
        token=token,
        user=UserOut(
            id=identity.id,
            email=identity.email,
            name=identity.name,
            picture=identity.picture
        )
    )


@auth_router.post("/signup", response_model=AuthResponse)
async def signup(
    payload: SignupRequest,
    users: UserStore = Depends(get_user_store)
):
    name = payload.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Email, password, and name are required")
    if len(payload.password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(status_code=400, detail="Password must be at least 6 characters")

    if await users.get_by_email(payload.email):
        raise HTTPException(status_code=400, detail="User with this email already exists")

    user = User(
        id=f"user_{uuid4().hex[:16]}",
        email=payload.email,
        name=name,
        password_hash=get_password_hash(payload.password),
        created_at=datetime.now(timezone.utc)
    )
    try:
        await users.insert(user)
    except ValueError:
        raise HTTPException(status_code=400, detail="User with this email already exists")

    logger.info(f"New account {user.id} for {user.email}")
    return AuthResponse(
        token=issue_access_token(user.id, user.email, user.name),
        user=UserOut(id=user.id, email=user.email, name=user.name)
    )


@auth_router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    users: UserStore = Depends(get_user_store)
):
    user = await users.get_by_email(payload.email)
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return AuthResponse(
        token=issue_access_token(user.id, user.email, user.name),
        user=UserOut(id=user.id, email=user.email, name=user.name)
    )


@auth_router.get("/me", response_model=MeResponse)
async def me(current_user: dict = Depends(get_current_user)):
    return MeResponse(
        user=UserOut(
            id=current_user["id"],
            email=current_user["email"],
            name=current_user["name"],
            picture=current_user["picture"]
        )
    )
