import logging

from sqlalchemy.orm import Session
from core.auth import hash_password
from models.user import User

logger = logging.getLogger(__name__)


def get_user_by_username(db: Session, username: str):
    return db.query(User).filter(User.username == username).first()


def create_user(db: Session, username: str, password: str, profile_pic_link: str | None = None):
    user = User(
        username=username,
        password_hash=hash_password(password),
        profile_pic_link=profile_pic_link,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def ensure_admin_user(db: Session, username: str | None, password: str | None, profile_pic_link: str | None = None):
    """Create the admin account from configuration if it does not exist yet."""
    if not username or not password:
        return None
    user = get_user_by_username(db, username)
    if user:
        return user
    logger.info("Seeding admin user %r", username)
    return create_user(db, username, password, profile_pic_link)
