from sqlalchemy import Column, String, Text, Index, JSON
from models.base import Base, IdMixin, TimestampMixin

class Project(Base, IdMixin, TimestampMixin):
    __tablename__ = "projects"

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    features = Column(JSON, nullable=False, default=list)
    tools = Column(JSON, nullable=False, default=list)
    github_link = Column(String(512), nullable=True)
    deployed_url = Column(String(512), nullable=True)
    duration = Column(String(128), nullable=True)
    challenges = Column(Text, nullable=True)
    cloudinary_video_url = Column(String(1024), nullable=True)
    cloudinary_video_public_id = Column(String(255), nullable=True)
    cloudinary_thumbnail_url = Column(String(1024), nullable=True)
    cloudinary_thumbnail_public_id = Column(String(255), nullable=True)

Index("idx_projects_created_at", Project.created_at.desc())
