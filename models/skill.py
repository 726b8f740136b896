from sqlalchemy import Column, String, Index, JSON
from models.base import Base, IdMixin, TimestampMixin

class Skill(Base, IdMixin, TimestampMixin):
    __tablename__ = "skills"

    name = Column(String(255), nullable=False)
    topics = Column(JSON, nullable=False, default=list)
    image_url = Column(String(1024), nullable=False)
    image_public_id = Column(String(255), nullable=False)

Index("idx_skills_created_at", Skill.created_at.desc())
