from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Cookie, Header, Request, Response
from jose import JWTError, jwt
from passlib.context import CryptContext

from core.config import settings
from core.errors import UnauthorizedError
from schemas.auth_schema import TokenUser

ALGORITHM = "HS256"
COOKIE_NAME = "token"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # Unknown or corrupt hash format
        return False


def create_access_token(user_id: str, username: str, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS))
    payload = {"id": user_id, "username": username, "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> TokenUser:
    """Raises ``JWTError`` for bad signatures, expired or malformed tokens."""
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    user_id = payload.get("id")
    username = payload.get("username")
    if not user_id or not username:
        raise JWTError("Token missing identity claims")
    return TokenUser(id=str(user_id), username=username)


def _is_secure_request(request: Request) -> bool:
    # request.url.scheme already reflects X-Forwarded-Proto behind ProxyHeadersMiddleware
    return (
        settings.is_production
        or request.url.scheme == "https"
        or request.headers.get("x-forwarded-proto", "").lower() == "https"
    )


def cookie_options(request: Request) -> dict:
    secure = _is_secure_request(request)
    return {
        "httponly": True,
        "secure": secure,
        "samesite": "none" if secure else "lax",
        "path": "/",
    }


def set_session_cookie(response: Response, request: Request, token: str) -> None:
    response.set_cookie(
        COOKIE_NAME,
        token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_HOURS * 60 * 60,
        **cookie_options(request),
    )


def clear_session_cookie(response: Response, request: Request) -> None:
    response.delete_cookie(COOKIE_NAME, **cookie_options(request))


def _extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


def get_current_user(
    token: Optional[str] = Cookie(None),
    authorization: Optional[str] = Header(None),
) -> TokenUser:
    token = token or _extract_bearer_token(authorization)
    if not token:
        raise UnauthorizedError("Not authenticated")

    try:
        return decode_access_token(token)
    except JWTError as exc:
        raise UnauthorizedError("Invalid or expired token") from exc
