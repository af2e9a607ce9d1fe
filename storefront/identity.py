# storefront/identity.py
import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext
from passlib.exc import UnknownHashError

from .config import Settings
from .errors import AuthenticationFailed

logger = logging.getLogger(__name__)


class IdentityService:
    """Password hashing and bearer tokens carrying the user id in ``sub``."""

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 60):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes
        # Argon2 for new hashes; bcrypt stays in the context so older hashes still verify
        self.pwd_context = CryptContext(schemes=["argon2", "bcrypt"], deprecated="auto")

    @classmethod
    def from_settings(cls, settings: Settings) -> "IdentityService":
        return cls(
            secret_key=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            expire_minutes=settings.access_token_expire_minutes,
        )

    # 🔐 Passwords
    def hash_password(self, password: str) -> str:
        return self.pwd_context.hash(password)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        try:
            return self.pwd_context.verify(plain_password, hashed_password)
        except (UnknownHashError, ValueError):
            # unrecognised or corrupt hash -> authentication failure, not a 500
            return False

    # 🔑 Tokens
    def issue_token(self, user_id: int, expires_delta: timedelta = None) -> str:
        if expires_delta is None:
            expires_delta = timedelta(minutes=self.expire_minutes)
        expire = datetime.now(timezone.utc) + expires_delta
        to_encode = {"sub": str(user_id), "exp": expire}
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> int:
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as exc:
            logger.warning("Token verification failed: %s", exc)
            raise AuthenticationFailed("Invalid token")

        subject = payload.get("sub")
        if subject is None or not str(subject).isdigit():
            logger.warning("Token without a usable subject")
            raise AuthenticationFailed("Invalid token")
        return int(subject)
