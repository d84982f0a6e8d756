import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from bson.objectid import ObjectId
from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from passlib.context import CryptContext
from jose import jwt, JWTError

from app.models.user import User
from app.utils.base import AuthError, translate_storage_errors
from app.utils.config import settings


logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.bcrypt_rounds)
# auto_error is off so a missing header fails with the same body as a bad token
bearer_scheme = OAuth2PasswordBearer(tokenUrl="/users/login", auto_error=False)


@dataclass
class Session:
    """An authenticated request: the resolved user and the token it presented."""
    user: User
    token: str


def verify_password(plain: str, hashed: str) -> bool:
    """Verify plaintext password against a bcrypt hash."""
    return pwd_context.verify(plain, hashed)


def hash_password(plain: str) -> str:
    """Hash a plaintext password using bcrypt."""
    return pwd_context.hash(plain)


def create_token(subject: str) -> str:
    """Create a signed JWT for subject.

    A random jti keeps two logins within the same second distinct. An exp
    claim is only added when token_expires_minutes is configured.
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "iat": int(now.timestamp()),
        "jti": uuid.uuid4().hex,
    }
    if settings.token_expires_minutes:
        payload["exp"] = int((now + timedelta(minutes=settings.token_expires_minutes)).timestamp())
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def issue(user: User) -> str:
    """Mint a session token for user and record it as active."""
    token = create_token(subject=str(user.id))
    with translate_storage_errors("token issue"):
        updated = User.objects(id=user.id).update_one(push__tokens=token)
        if not updated:
            raise AuthError()
        user.reload("tokens")
    return token


def verify(token: str) -> User:
    """Resolve token to its user, or raise AuthError.

    The signature must be valid and the exact token must still be in the
    user's active token list.
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise AuthError()

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not ObjectId.is_valid(user_id):
        raise AuthError()

    with translate_storage_errors("token verify"):
        user = User.objects(id=user_id, tokens=token).first()
    if not user:
        raise AuthError()
    return user


def revoke(user: User, token: str) -> None:
    """Log out a single session."""
    with translate_storage_errors("token revoke"):
        User.objects(id=user.id).update_one(pull__tokens=token)
        user.reload("tokens")
    logger.info("User %s logged out one session", user.id)


def revoke_all(user: User) -> None:
    """Log out every session of user."""
    with translate_storage_errors("token revoke all"):
        User.objects(id=user.id).update_one(set__tokens=[])
        user.reload("tokens")
    logger.info("User %s logged out all sessions", user.id)


def get_current_session(request: Request, token: str | None = Depends(bearer_scheme)) -> Session:
    """Auth dependency guarding every protected route.

    Fails closed with the same generic 401 whether the header is missing,
    malformed, badly signed or revoked. On success the user and token are
    also attached to request.state.
    """
    if not token:
        raise AuthError()
    user = verify(token)
    request.state.user = user
    request.state.token = token
    return Session(user=user, token=token)


def get_current_user(session: Session = Depends(get_current_session)) -> User:
    return session.user
