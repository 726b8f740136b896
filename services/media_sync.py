"""Keeps record media fields and Cloudinary assets in step.

Deleting an orphaned asset is best-effort: ``MediaStore.delete_asset`` reports
failures through ``DeleteResult`` and the record mutation goes ahead
regardless.
"""

import logging
from dataclasses import dataclass
from typing import Literal, Optional

from starlette.datastructures import UploadFile

from core.errors import ValidationError
from core.forms import RequestBody
from services.media_store import MAX_BYTES, DeleteResult, MediaStore, UploadedAsset

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MediaSlot:
    """One url/public-id pair on a record, keyed by its JSON field names."""

    url_key: str
    id_key: str
    remove_flag: str
    file_field: str
    resource_type: str
    folder: str


PROJECT_VIDEO = MediaSlot(
    url_key="cloudinaryVideoUrl",
    id_key="cloudinaryVideoPublicId",
    remove_flag="removeVideo",
    file_field="video",
    resource_type="video",
    folder="project-videos",
)
PROJECT_THUMBNAIL = MediaSlot(
    url_key="cloudinaryThumbnailUrl",
    id_key="cloudinaryThumbnailPublicId",
    remove_flag="removeThumbnail",
    file_field="thumbnail",
    resource_type="image",
    folder="project-thumbnails",
)
SKILL_IMAGE = MediaSlot(
    url_key="imageUrl",
    id_key="imagePublicId",
    remove_flag="removeImage",
    file_field="image",
    resource_type="image",
    folder="skill-images",
)

PROJECT_SLOTS = (PROJECT_VIDEO, PROJECT_THUMBNAIL)
SKILL_SLOTS = (SKILL_IMAGE,)


@dataclass
class MediaChange:
    slot: MediaSlot
    action: Literal["keep", "replace", "remove", "upload"]
    old_url: Optional[str] = None
    old_public_id: Optional[str] = None
    new_url: Optional[str] = None
    new_public_id: Optional[str] = None
    file: Optional[UploadFile] = None
    uploaded: Optional[UploadedAsset] = None

    @property
    def orphan(self) -> Optional[str]:
        """Public id of the stored asset this change leaves unreferenced."""
        if self.action == "keep" or not self.old_public_id:
            return None
        if self.old_public_id == self.new_public_id:
            return None
        return self.old_public_id

    def fields(self) -> dict:
        if self.action == "keep":
            return {self.slot.url_key: self.old_url, self.slot.id_key: self.old_public_id}
        return {self.slot.url_key: self.new_url, self.slot.id_key: self.new_public_id}


def plan_media_change(slot: MediaSlot, existing: Optional[dict], body: RequestBody) -> MediaChange:
    """Decide what the request does to one media pair.

    Precedence: explicit removal, then a new url/id pair, then a legacy file
    upload. Anything else keeps the stored pair.
    """
    existing = existing or {}
    change = MediaChange(
        slot=slot,
        action="keep",
        old_url=existing.get(slot.url_key),
        old_public_id=existing.get(slot.id_key),
    )
    fields = body.fields
    url = fields.get(slot.url_key)
    public_id = fields.get(slot.id_key)

    if body.flag(slot.remove_flag) or (slot.url_key in fields and url in ("", None)):
        change.action = "remove"
        return change

    if url or public_id:
        if not url:
            raise ValidationError({slot.url_key: f"{slot.url_key} is required when {slot.id_key} is set"})
        if not public_id:
            raise ValidationError({slot.id_key: f"{slot.id_key} is required when {slot.url_key} is set"})
        change.action = "replace"
        change.new_url = url
        change.new_public_id = public_id
        return change

    upload = body.files.get(slot.file_field)
    if upload is not None:
        change.action = "upload"
        change.file = upload
    return change


def _upload(store: MediaStore, change: MediaChange) -> None:
    slot = change.slot
    # One byte past the ceiling is enough for the size check to trip
    data = change.file.file.read(MAX_BYTES[slot.resource_type] + 1)
    asset = store.upload(data, change.file.filename, change.file.content_type, slot.resource_type, slot.folder)
    change.uploaded = asset
    change.new_url = asset.url
    change.new_public_id = asset.public_id


def prepare_media(store: MediaStore, slots, body: RequestBody, existing: Optional[dict] = None) -> list[MediaChange]:
    """Plan every slot and run legacy uploads. Nothing is deleted yet."""
    changes = [plan_media_change(slot, existing, body) for slot in slots]
    try:
        for change in changes:
            if change.action == "upload":
                _upload(store, change)
    except Exception:
        discard_uploads(store, changes)
        raise
    return changes


def media_fields(changes: list[MediaChange]) -> dict:
    fields = {}
    for change in changes:
        fields.update(change.fields())
    return fields


def delete_orphans(store: MediaStore, changes: list[MediaChange]) -> list[DeleteResult]:
    results = []
    for change in changes:
        if change.orphan:
            results.append(store.delete_asset(change.orphan, change.slot.resource_type))
    return results


def discard_uploads(store: MediaStore, changes: list[MediaChange]) -> list[DeleteResult]:
    """Undo uploads made for a request that ended up rejected."""
    results = []
    for change in changes:
        if change.uploaded is not None:
            results.append(store.delete_asset(change.uploaded.public_id, change.slot.resource_type))
    return results


def purge_media(store: MediaStore, slots, record: dict) -> list[DeleteResult]:
    results = []
    for slot in slots:
        public_id = record.get(slot.id_key)
        if public_id:
            results.append(store.delete_asset(public_id, slot.resource_type))
    failed = [r for r in results if not r.ok]
    if failed:
        logger.warning("%d media asset(s) left behind: %s", len(failed), ", ".join(r.public_id for r in failed))
    return results
