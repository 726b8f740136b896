import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from core.auth import get_current_user
from core.database import get_db
from core.forms import RequestBody, read_body
from crud.project_crud import list_projects, get_project, create_project, merge_project, apply_project, delete_project, serialize_project
from schemas.auth_schema import TokenUser
from schemas.base import record_fields
from schemas.project_schema import ProjectCreate
from services.media_store import MediaStore, get_media_store
from services.media_sync import PROJECT_SLOTS, prepare_media, media_fields, delete_orphans, discard_uploads, purge_media

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects", tags=["Projects"])

ARRAY_FIELDS = ("features", "tools")


async def project_body(request: Request) -> RequestBody:
    return await read_body(request, ARRAY_FIELDS)


@router.get("")
def list_all(db: Session = Depends(get_db)):
    projects = list_projects(db)
    return {
        "success": True,
        "count": len(projects),
        "projects": [serialize_project(p) for p in projects],
    }


@router.get("/{project_id}")
def read_one(project_id: str, db: Session = Depends(get_db)):
    return {"success": True, "project": serialize_project(get_project(db, project_id))}


@router.post("", status_code=201)
def create(
    current_user: TokenUser = Depends(get_current_user),
    body: RequestBody = Depends(project_body),
    db: Session = Depends(get_db),
    store: MediaStore = Depends(get_media_store),
):
    changes = prepare_media(store, PROJECT_SLOTS, body)
    fields = {**body.fields, **media_fields(changes)}
    try:
        proj = create_project(db, fields)
    except Exception:
        discard_uploads(store, changes)
        raise
    logger.info("Project %s created by %s (%s body)", proj.id, current_user.username, body.source)
    return {
        "success": True,
        "message": "Project added successfully",
        "project": serialize_project(proj),
    }


@router.put("/{project_id}")
def update(
    project_id: str,
    current_user: TokenUser = Depends(get_current_user),
    body: RequestBody = Depends(project_body),
    db: Session = Depends(get_db),
    store: MediaStore = Depends(get_media_store),
):
    proj = get_project(db, project_id)
    changes = prepare_media(store, PROJECT_SLOTS, body, existing=record_fields(ProjectCreate, proj))
    fields = {**body.fields, **media_fields(changes)}
    try:
        payload = merge_project(proj, fields)
    except Exception:
        discard_uploads(store, changes)
        raise

    # Replaced or removed media goes before the record is saved; failures are only logged
    delete_orphans(store, changes)
    proj = apply_project(db, proj, payload)
    logger.info("Project %s updated by %s", proj.id, current_user.username)
    return {
        "success": True,
        "message": "Project updated successfully",
        "project": serialize_project(proj),
    }


@router.delete("/{project_id}")
def delete(
    project_id: str,
    current_user: TokenUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    store: MediaStore = Depends(get_media_store),
):
    proj = get_project(db, project_id)
    purge_media(store, PROJECT_SLOTS, record_fields(ProjectCreate, proj))
    data = serialize_project(proj)
    delete_project(db, proj.id)
    logger.info("Project %s deleted by %s", data["id"], current_user.username)
    return {
        "success": True,
        "message": "Project deleted successfully",
        "project": data,
    }
