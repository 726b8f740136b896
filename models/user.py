from sqlalchemy import Column, String
from models.base import Base, IdMixin, TimestampMixin

class User(Base, IdMixin, TimestampMixin):
    __tablename__ = "users"

    username = Column(String(150), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    profile_pic_link = Column(String(512), nullable=True)
