from sqlalchemy.orm import Session
from sqlalchemy import desc
from core.errors import NotFoundError
from crud.utils import check_id
from models.project import Project
from schemas.base import alias_keys, check_media_pairs, record_fields, validate_fields
from schemas.project_schema import MEDIA_PAIRS, ProjectCreate, ProjectResponse


def list_projects(db: Session):
    return db.query(Project).order_by(desc(Project.created_at)).all()


def get_project(db: Session, project_id: str) -> Project:
    project_id = check_id(project_id, "project")
    proj = db.query(Project).filter(Project.id == project_id).first()
    if not proj:
        raise NotFoundError("Project not found")
    return proj


def validate_project(fields: dict) -> ProjectCreate:
    payload = validate_fields(ProjectCreate, alias_keys(ProjectCreate, fields))
    check_media_pairs(payload, MEDIA_PAIRS)
    return payload


def create_project(db: Session, fields: dict) -> Project:
    payload = validate_project(fields)
    proj = Project(**payload.model_dump())
    db.add(proj)
    db.commit()
    db.refresh(proj)
    return proj


def merge_project(proj: Project, fields: dict) -> ProjectCreate:
    """Overlay ``fields`` on the stored record and validate the result."""
    current = record_fields(ProjectCreate, proj)
    current.update(alias_keys(ProjectCreate, fields))
    return validate_project(current)


def apply_project(db: Session, proj: Project, payload: ProjectCreate) -> Project:
    for attr, value in payload.model_dump().items():
        setattr(proj, attr, value)
    db.commit()
    db.refresh(proj)
    return proj


def update_project(db: Session, project_id: str, fields: dict) -> Project:
    proj = get_project(db, project_id)
    return apply_project(db, proj, merge_project(proj, fields))


def delete_project(db: Session, project_id: str) -> Project:
    proj = get_project(db, project_id)
    db.delete(proj)
    db.commit()
    return proj


def serialize_project(proj: Project) -> dict:
    data = ProjectResponse.model_validate(proj).model_dump(by_alias=True, mode="json")
    data["_id"] = data["id"]
    return data
