from datetime import datetime

from pydantic import field_validator

from schemas.base import CamelModel, clean_list, require_text

MEDIA_PAIRS = [("image_url", "image_public_id")]


class SkillBase(CamelModel):
    name: str
    topics: list[str]
    image_url: str
    image_public_id: str


class SkillCreate(SkillBase):
    @field_validator("name", "image_url", "image_public_id")
    @classmethod
    def strip_required(cls, value):
        return require_text(value)

    @field_validator("topics")
    @classmethod
    def at_least_one_topic(cls, value):
        value = clean_list(value)
        if not value:
            raise ValueError("must contain at least one topic")
        return value


class SkillResponse(SkillBase):
    id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {
        "from_attributes": True,
    }
