import logging

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session
from core.auth import clear_session_cookie, create_access_token, get_current_user, set_session_cookie, verify_password
from core.database import get_db
from core.errors import NotFoundError, UnauthorizedError
from crud.user_crud import get_user_by_username
from schemas.auth_schema import LoginRequest, LoginResponse, LoginUser, TokenUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("/login")
def login(payload: LoginRequest, request: Request, response: Response, db: Session = Depends(get_db)):
    """
    Check admin credentials and set the session cookie.
    """
    user = get_user_by_username(db, payload.username)
    if not user:
        raise NotFoundError("User not found")
    if not verify_password(payload.password, user.password_hash):
        logger.warning("Failed login for %r", payload.username)
        raise UnauthorizedError("Invalid credentials")

    token = create_access_token(user.id, user.username)
    set_session_cookie(response, request, token)
    logger.info("User %r logged in", user.username)

    body = LoginResponse(user=LoginUser(username=user.username, profile_pic=user.profile_pic_link))
    return body.model_dump(by_alias=True)


@router.post("/logout")
def logout(request: Request, response: Response):
    clear_session_cookie(response, request)
    return {"success": True, "message": "Logout successful"}


@router.get("/verify")
def verify(current_user: TokenUser = Depends(get_current_user)):
    return {"success": True, "user": {"username": current_user.username}}
