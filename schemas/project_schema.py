from datetime import datetime

from pydantic import field_validator

from schemas.base import CamelModel, blank_to_none, check_http_url, clean_list, require_text

MEDIA_PAIRS = [
    ("cloudinary_video_url", "cloudinary_video_public_id"),
    ("cloudinary_thumbnail_url", "cloudinary_thumbnail_public_id"),
]


class ProjectBase(CamelModel):
    title: str
    description: str
    features: list[str] = []
    tools: list[str] = []
    github_link: str | None = None
    deployed_url: str | None = None
    duration: str | None = None
    challenges: str | None = None
    cloudinary_video_url: str | None = None
    cloudinary_video_public_id: str | None = None
    cloudinary_thumbnail_url: str | None = None
    cloudinary_thumbnail_public_id: str | None = None


class ProjectCreate(ProjectBase):
    """Full set of writable project fields, used for create and merged updates."""

    @field_validator("title", "description")
    @classmethod
    def strip_required(cls, value):
        return require_text(value)

    @field_validator("features", "tools")
    @classmethod
    def drop_blank_items(cls, value):
        return clean_list(value)

    @field_validator(
        "github_link",
        "deployed_url",
        "duration",
        "challenges",
        "cloudinary_video_url",
        "cloudinary_video_public_id",
        "cloudinary_thumbnail_url",
        "cloudinary_thumbnail_public_id",
        mode="before",
    )
    @classmethod
    def blank_optional(cls, value):
        return blank_to_none(value)

    @field_validator("github_link", "deployed_url")
    @classmethod
    def check_links(cls, value):
        return check_http_url(value)


class ProjectResponse(ProjectBase):
    id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {
        "from_attributes": True,
    }
