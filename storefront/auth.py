# storefront/auth.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .database import get_session
from .errors import AuthenticationFailed, NotFound
from .identity import IdentityService
from .models import User
from .schemas import Token, UserCreate, UserLogin, UserOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/users/login")


def get_identity(request: Request) -> IdentityService:
    return request.app.state.identity


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    identity: IdentityService = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
) -> User:
    user_id = identity.verify_token(token)

    result = await session.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFound("User not found")
    return user


# ✅ Registration
@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def register_user(
    payload: UserCreate,
    session: AsyncSession = Depends(get_session),
    identity: IdentityService = Depends(get_identity),
):
    result = await session.execute(select(User).where(User.email == payload.email))
    if result.scalar_one_or_none():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")

    user = User(
        email=payload.email,
        name=payload.name,
        password_hash=identity.hash_password(payload.password),
    )
    session.add(user)
    try:
        await session.commit()
    except IntegrityError:
        # a concurrent registration won the unique email
        await session.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")
    await session.refresh(user)

    logger.info("Registered user %s", user.id)
    return user


# ✅ Login (JSON body)
@router.post("/login", response_model=Token)
async def login_user(
    payload: UserLogin,
    session: AsyncSession = Depends(get_session),
    identity: IdentityService = Depends(get_identity),
):
    result = await session.execute(select(User).where(User.email == payload.email))
    user = result.scalar_one_or_none()

    if not user or not identity.verify_password(payload.password, user.password_hash):
        logger.warning("Failed login for %s", payload.email)
        raise AuthenticationFailed("Invalid credentials")

    return Token(access_token=identity.issue_token(user.id))


@router.get("/me", response_model=UserOut)
async def get_me(current_user: User = Depends(get_current_user)):
    return current_user
