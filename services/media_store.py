"""Cloudinary media store.

Talks to the Cloudinary REST API with ``requests``; every upload/destroy call
is signed server-side so the API secret never leaves the backend. The same
signing routine backs ``sign_upload`` for direct browser uploads.
"""

import hashlib
import logging
import os
import time
from dataclasses import asdict, dataclass
from typing import Optional

import requests
from fastapi import Request

from core.errors import BadRequestError, MediaStoreNotConfigured, UpstreamError

logger = logging.getLogger(__name__)

CLOUDINARY_API_BASE = "https://api.cloudinary.com/v1_1"
DEFAULT_TIMEOUT = 120

MB = 1024 * 1024
MAX_BYTES = {
    "video": 100 * MB,
    "image": 10 * MB,
}
ALLOWED_EXTENSIONS = {
    "video": ("mp4", "mov", "avi", "wmv", "flv", "webm", "mkv"),
    "image": ("jpeg", "jpg", "png", "gif", "webp"),
}

# Cloudinary leaves these out of the signed string; they still travel with the request
UNSIGNED_PARAMS = {"file", "resource_type", "cloud_name", "api_key"}


@dataclass(frozen=True)
class UploadedAsset:
    url: str
    public_id: str
    resource_type: str


@dataclass(frozen=True)
class DeleteResult:
    public_id: str
    ok: bool
    reason: Optional[str] = None


@dataclass(frozen=True)
class UploadSignature:
    signature: str
    timestamp: int
    folder: str
    resource_type: str
    api_key: str
    cloud_name: str

    def as_dict(self) -> dict:
        return asdict(self)


def api_sign_request(params: dict, api_secret: str) -> str:
    to_sign = "&".join(
        f"{key}={value}"
        for key, value in sorted(params.items())
        if key not in UNSIGNED_PARAMS and value not in (None, "")
    )
    return hashlib.sha1((to_sign + api_secret).encode("utf-8")).hexdigest()


def check_media_file(kind: str, filename: str, content_type: Optional[str], size: int) -> None:
    """Reject files whose extension, declared type or size are not allowed for ``kind``."""
    allowed = ALLOWED_EXTENSIONS[kind]
    ext = os.path.splitext(filename or "")[1].lower().lstrip(".")
    mime = (content_type or "").lower()
    type_ok = mime.startswith(f"{kind}/") or any(t in mime for t in allowed)
    if ext not in allowed or not type_ok:
        raise BadRequestError(f"Only {kind} files are allowed!")
    if size > MAX_BYTES[kind]:
        raise BadRequestError(f"File too large: {kind} uploads are limited to {MAX_BYTES[kind] // MB}MB")


class MediaStore:
    def __init__(
        self,
        cloud_name: Optional[str] = None,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        upload_preset: Optional[str] = None,
        http: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.upload_preset = upload_preset
        self.http = http or requests.Session()
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings) -> "MediaStore":
        return cls(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            upload_preset=settings.CLOUDINARY_UPLOAD_PRESET,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def _require_config(self) -> None:
        if not self.is_configured:
            raise MediaStoreNotConfigured()

    def _endpoint(self, resource_type: str, action: str) -> str:
        return f"{CLOUDINARY_API_BASE}/{self.cloud_name}/{resource_type}/{action}"

    def _signed(self, params: dict) -> dict:
        params = {k: v for k, v in params.items() if v not in (None, "")}
        params["timestamp"] = params.get("timestamp") or int(time.time())
        params["api_key"] = self.api_key
        params["signature"] = api_sign_request(params, self.api_secret)
        return params

    def public_config(self) -> dict:
        return {"cloudName": self.cloud_name, "uploadPreset": self.upload_preset or ""}

    def sign_upload(self, folder: str = "", resource_type: str = "auto", timestamp: Optional[int] = None) -> UploadSignature:
        self._require_config()
        folder = (folder or "").strip()
        timestamp = timestamp or int(time.time())
        signature = api_sign_request({"folder": folder, "timestamp": timestamp}, self.api_secret)
        return UploadSignature(
            signature=signature,
            timestamp=timestamp,
            folder=folder,
            resource_type=resource_type,
            api_key=self.api_key,
            cloud_name=self.cloud_name,
        )

    def upload(self, data: bytes, filename: str, content_type: Optional[str], resource_type: str, folder: str) -> UploadedAsset:
        check_media_file(resource_type, filename, content_type, len(data))
        self._require_config()

        try:
            resp = self.http.post(
                self._endpoint(resource_type, "upload"),
                data=self._signed({"folder": folder}),
                files={"file": (filename, data, content_type or "application/octet-stream")},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("Cloudinary %s upload failed: %s", resource_type, exc)
            raise UpstreamError(f"Error uploading {resource_type} to Cloudinary: {exc}") from exc

        if resp.status_code != 200:
            message = error_message(resp)
            logger.error("Cloudinary %s upload rejected (%s): %s", resource_type, resp.status_code, message)
            raise UpstreamError(f"Error uploading {resource_type} to Cloudinary: {message}")

        try:
            body = resp.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            body = {}
        url = body.get("secure_url") or body.get("url")
        public_id = body.get("public_id")
        if not url or not public_id:
            logger.error("Cloudinary %s upload returned no asset: %r", resource_type, body)
            raise UpstreamError(f"Error uploading {resource_type} to Cloudinary: unexpected response")

        asset = UploadedAsset(url=url, public_id=public_id, resource_type=resource_type)
        logger.info("Uploaded %s %s", resource_type, asset.public_id)
        return asset

    def upload_video(self, data: bytes, filename: str, content_type: Optional[str], folder: str = "project-videos") -> UploadedAsset:
        return self.upload(data, filename, content_type, "video", folder)

    def upload_image(self, data: bytes, filename: str, content_type: Optional[str], folder: str = "project-thumbnails") -> UploadedAsset:
        return self.upload(data, filename, content_type, "image", folder)

    def delete_asset(self, public_id: str, resource_type: str = "image") -> DeleteResult:
        """Remove an asset. Never raises; the outcome is reported in the result."""
        if not self.is_configured:
            reason = "Cloudinary credentials are not configured"
        else:
            try:
                resp = self.http.post(
                    self._endpoint(resource_type, "destroy"),
                    data=self._signed({"public_id": public_id}),
                    timeout=self.timeout,
                )
                if resp.status_code == 200 and resp.json().get("result") == "ok":
                    logger.info("Deleted %s %s from Cloudinary", resource_type, public_id)
                    return DeleteResult(public_id=public_id, ok=True)
                reason = error_message(resp)
            except (requests.RequestException, ValueError) as exc:
                reason = str(exc)

        logger.warning("Could not delete %s %s from Cloudinary: %s", resource_type, public_id, reason)
        return DeleteResult(public_id=public_id, ok=False, reason=reason)

    def ping(self) -> bool:
        if not self.is_configured:
            return False
        try:
            resp = self.http.get(
                f"{CLOUDINARY_API_BASE}/{self.cloud_name}/ping",
                auth=(self.api_key, self.api_secret),
                timeout=10,
            )
        except requests.RequestException as exc:
            logger.warning("Cloudinary ping failed: %s", exc)
            return False
        return resp.status_code == 200


def error_message(resp) -> str:
    try:
        body = resp.json()
    except ValueError:
        return f"HTTP {resp.status_code}"
    if isinstance(body.get("error"), dict):
        return body["error"].get("message") or f"HTTP {resp.status_code}"
    return body.get("result") or body.get("message") or f"HTTP {resp.status_code}"


def get_media_store(request: Request) -> MediaStore:
    return request.app.state.media_store
