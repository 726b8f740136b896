from sqlalchemy.orm import Session
from sqlalchemy import desc
from core.errors import NotFoundError
from crud.utils import check_id
from models.skill import Skill
from schemas.base import alias_keys, check_media_pairs, record_fields, validate_fields
from schemas.skill_schema import MEDIA_PAIRS, SkillCreate, SkillResponse


def list_skills(db: Session):
    return db.query(Skill).order_by(desc(Skill.created_at)).all()


def get_skill(db: Session, skill_id: str) -> Skill:
    skill_id = check_id(skill_id, "skill")
    skill = db.query(Skill).filter(Skill.id == skill_id).first()
    if not skill:
        raise NotFoundError("Skill not found")
    return skill


def validate_skill(fields: dict) -> SkillCreate:
    payload = validate_fields(SkillCreate, alias_keys(SkillCreate, fields))
    check_media_pairs(payload, MEDIA_PAIRS)
    return payload


def create_skill(db: Session, fields: dict) -> Skill:
    payload = validate_skill(fields)
    skill = Skill(**payload.model_dump())
    db.add(skill)
    db.commit()
    db.refresh(skill)
    return skill


def merge_skill(skill: Skill, fields: dict) -> SkillCreate:
    current = record_fields(SkillCreate, skill)
    current.update(alias_keys(SkillCreate, fields))
    return validate_skill(current)


def apply_skill(db: Session, skill: Skill, payload: SkillCreate) -> Skill:
    for attr, value in payload.model_dump().items():
        setattr(skill, attr, value)
    db.commit()
    db.refresh(skill)
    return skill


def update_skill(db: Session, skill_id: str, fields: dict) -> Skill:
    skill = get_skill(db, skill_id)
    return apply_skill(db, skill, merge_skill(skill, fields))


def delete_skill(db: Session, skill_id: str) -> Skill:
    skill = get_skill(db, skill_id)
    db.delete(skill)
    db.commit()
    return skill


def serialize_skill(skill: Skill) -> dict:
    data = SkillResponse.model_validate(skill).model_dump(by_alias=True, mode="json")
    data["_id"] = data["id"]
    return data
