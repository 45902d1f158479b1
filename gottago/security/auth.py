import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from bson import ObjectId
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from passlib.context import CryptContext

from gottago import settings
from gottago.deps import get_required_db

logger = logging.getLogger(__name__)

ROLES = ("user", "moderator", "admin")
MODERATOR_ROLES = ("moderator", "admin")

pwd_context = CryptContext(schemes=["bcrypt_sha256"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def create_access_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes())
    )
    payload = {"sub": subject, "exp": expire}
    return jwt.encode(payload, settings.jwt_secret(), algorithm=settings.jwt_algorithm())


def decode_subject(token: Optional[str]) -> Optional[str]:
    """Return the token subject (email), or None when the token is missing or invalid."""
    if not token:
        return None
    try:
        payload = jwt.decode(token, settings.jwt_secret(), algorithms=[settings.jwt_algorithm()])
    except JWTError:
        return None
    return payload.get("sub")


def is_admin(user: Optional[dict]) -> bool:
    return bool(user) and user.get("role") == "admin"


def is_moderator(user: Optional[dict]) -> bool:
    return bool(user) and user.get("role") in MODERATOR_ROLES


async def get_current_user(token: str = Depends(oauth2_scheme), database=Depends(get_required_db)):
    """
    Authorization: Bearer <token>
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    email = decode_subject(token)
    if email is None:
        raise credentials_exception

    user = await database["users"].find_one({"email": email})
    if not user:
        raise credentials_exception
    user.setdefault("role", "user")
    return user


def require_role(*roles: str):
    """Dependency factory: the current user must hold one of the given roles."""

    async def checker(user: dict = Depends(get_current_user)) -> dict:
        if user.get("role") not in roles:
            logger.info("User %s with role %s denied (needs %s)", user.get("email"), user.get("role"), roles)
            raise HTTPException(status_code=403, detail="Insufficient role")
        return user

    return checker


require_moderator = require_role(*MODERATOR_ROLES)
require_admin = require_role("admin")


def user_oid(value: str) -> ObjectId:
    if not ObjectId.is_valid(value):
        raise HTTPException(status_code=400, detail="Invalid user id")
    return ObjectId(value)
