import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from core.auth import get_current_user
from core.database import get_db
from core.forms import RequestBody, read_body
from crud.skill_crud import list_skills, get_skill, create_skill, merge_skill, apply_skill, delete_skill, serialize_skill
from schemas.auth_schema import TokenUser
from schemas.base import record_fields
from schemas.skill_schema import SkillCreate
from services.media_store import MediaStore, get_media_store
from services.media_sync import SKILL_SLOTS, prepare_media, media_fields, delete_orphans, discard_uploads, purge_media

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/skills", tags=["Skills"])

ARRAY_FIELDS = ("topics",)


async def skill_body(request: Request) -> RequestBody:
    return await read_body(request, ARRAY_FIELDS)


@router.get("")
def list_all(db: Session = Depends(get_db)):
    skills = list_skills(db)
    return {
        "success": True,
        "count": len(skills),
        "skills": [serialize_skill(s) for s in skills],
    }


@router.get("/{skill_id}")
def read_one(skill_id: str, db: Session = Depends(get_db)):
    return {"success": True, "skill": serialize_skill(get_skill(db, skill_id))}


@router.post("", status_code=201)
def create(
    current_user: TokenUser = Depends(get_current_user),
    body: RequestBody = Depends(skill_body),
    db: Session = Depends(get_db),
    store: MediaStore = Depends(get_media_store),
):
    changes = prepare_media(store, SKILL_SLOTS, body)
    fields = {**body.fields, **media_fields(changes)}
    try:
        skill = create_skill(db, fields)
    except Exception:
        discard_uploads(store, changes)
        raise
    logger.info("Skill %s created by %s (%s body)", skill.id, current_user.username, body.source)
    return {
        "success": True,
        "message": "Skill added successfully",
        "skill": serialize_skill(skill),
    }


@router.put("/{skill_id}")
def update(
    skill_id: str,
    current_user: TokenUser = Depends(get_current_user),
    body: RequestBody = Depends(skill_body),
    db: Session = Depends(get_db),
    store: MediaStore = Depends(get_media_store),
):
    skill = get_skill(db, skill_id)
    changes = prepare_media(store, SKILL_SLOTS, body, existing=record_fields(SkillCreate, skill))
    fields = {**body.fields, **media_fields(changes)}
    try:
        payload = merge_skill(skill, fields)
    except Exception:
        discard_uploads(store, changes)
        raise

    # Replaced or removed media goes before the record is saved; failures are only logged
    delete_orphans(store, changes)
    skill = apply_skill(db, skill, payload)
    logger.info("Skill %s updated by %s", skill.id, current_user.username)
    return {
        "success": True,
        "message": "Skill updated successfully",
        "skill": serialize_skill(skill),
    }


@router.delete("/{skill_id}")
def delete(
    skill_id: str,
    current_user: TokenUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    store: MediaStore = Depends(get_media_store),
):
    skill = get_skill(db, skill_id)
    purge_media(store, SKILL_SLOTS, record_fields(SkillCreate, skill))
    data = serialize_skill(skill)
    delete_skill(db, skill.id)
    logger.info("Skill %s deleted by %s", data["id"], current_user.username)
    return {
        "success": True,
        "message": "Skill deleted successfully",
        "skill": data,
    }
