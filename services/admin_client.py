"""Admin-side client for the portfolio API.

Large media goes straight to Cloudinary: the client asks the API for a
signature, uploads the file itself, then sends only the resulting URL and
public id to the API as JSON. Used by scripts and the test suite; the browser
dashboard follows the same sequence.
"""

import logging
from typing import Optional

import requests

from services.media_store import CLOUDINARY_API_BASE, DEFAULT_TIMEOUT, UploadedAsset, error_message
from services.media_sync import PROJECT_THUMBNAIL, PROJECT_VIDEO, SKILL_IMAGE, MediaSlot

logger = logging.getLogger(__name__)

# (filename, data, content_type)
MediaFile = tuple[str, bytes, Optional[str]]


class AdminClientError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AdminClient:
    def __init__(self, base_url: str, http=None, cdn=None, timeout: float = DEFAULT_TIMEOUT):
        base_url = base_url.rstrip("/")
        self.api_base = base_url if base_url.endswith("/api") else f"{base_url}/api"
        # ``http`` keeps the session cookie; ``cdn`` only ever talks to Cloudinary
        self.http = http or requests.Session()
        self.cdn = cdn or requests.Session()
        self.timeout = timeout
        self._config: Optional[dict] = None

    def _url(self, path: str) -> str:
        return f"{self.api_base}/{path.lstrip('/')}"

    def _call(self, method: str, path: str, **kwargs) -> dict:
        resp = self.http.request(method, self._url(path), timeout=self.timeout, **kwargs)
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if resp.status_code >= 400:
            message = body.get("message") if isinstance(body, dict) else None
            raise AdminClientError(message or f"HTTP {resp.status_code}", resp.status_code)
        return body

    def login(self, username: str, password: str) -> dict:
        return self._call("POST", "users/login", json={"username": username, "password": password})["user"]

    def logout(self) -> None:
        self._call("POST", "users/logout")

    def cloudinary_config(self) -> dict:
        if self._config is None:
            config = self._call("GET", "cloudinary-config")
            if not config.get("cloudName"):
                raise AdminClientError("Cloudinary cloud name is not configured on the backend")
            self._config = config
        return self._config

    def upload_signature(self, folder: str, resource_type: str) -> Optional[dict]:
        """Signed upload parameters, or ``None`` when the API will not sign."""
        try:
            return self._call("POST", "cloudinary-signature", json={"folder": folder, "resource_type": resource_type})
        except AdminClientError as exc:
            logger.warning("Signed upload unavailable, falling back to preset: %s", exc.message)
            return None

    def upload(self, media: MediaFile, resource_type: str, folder: str) -> UploadedAsset:
        config = self.cloudinary_config()
        params = self.upload_signature(folder, resource_type)

        if params and params.get("signature"):
            # resource_type is carried by the endpoint path, never by the signature
            data = {
                "api_key": params["api_key"],
                "timestamp": params["timestamp"],
                "signature": params["signature"],
            }
            if params.get("folder"):
                data["folder"] = params["folder"]
            cloud_name = params.get("cloud_name") or config["cloudName"]
        else:
            data = {"upload_preset": config.get("uploadPreset") or f"unsigned_{resource_type}", "folder": folder}
            cloud_name = config["cloudName"]

        filename, content, content_type = media
        try:
            resp = self.cdn.post(
                f"{CLOUDINARY_API_BASE}/{cloud_name}/{resource_type}/upload",
                data=data,
                files={"file": (filename, content, content_type or "application/octet-stream")},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise AdminClientError(f"Upload failed: {exc}") from exc

        if resp.status_code != 200:
            raise AdminClientError(f"Upload failed: {error_message(resp)}", resp.status_code)
        body = resp.json()
        if not body.get("public_id") or not body.get("secure_url"):
            raise AdminClientError("Upload failed: Cloudinary returned no asset")
        return UploadedAsset(url=body["secure_url"], public_id=body["public_id"], resource_type=resource_type)

    def _attach(self, fields: dict, slot: MediaSlot, media: Optional[MediaFile]) -> dict:
        if media is None:
            return fields
        asset = self.upload(media, slot.resource_type, slot.folder)
        return {**fields, slot.url_key: asset.url, slot.id_key: asset.public_id}

    def create_project(self, fields: dict, video: Optional[MediaFile] = None, thumbnail: Optional[MediaFile] = None) -> dict:
        fields = self._attach(fields, PROJECT_VIDEO, video)
        fields = self._attach(fields, PROJECT_THUMBNAIL, thumbnail)
        return self._call("POST", "projects", json=fields)["project"]

    def update_project(self, project_id: str, fields: dict, video: Optional[MediaFile] = None, thumbnail: Optional[MediaFile] = None) -> dict:
        fields = self._attach(fields, PROJECT_VIDEO, video)
        fields = self._attach(fields, PROJECT_THUMBNAIL, thumbnail)
        return self._call("PUT", f"projects/{project_id}", json=fields)["project"]

    def delete_project(self, project_id: str) -> dict:
        return self._call("DELETE", f"projects/{project_id}")["project"]

    def create_skill(self, fields: dict, image: Optional[MediaFile] = None) -> dict:
        fields = self._attach(fields, SKILL_IMAGE, image)
        return self._call("POST", "skills", json=fields)["skill"]

    def update_skill(self, skill_id: str, fields: dict, image: Optional[MediaFile] = None) -> dict:
        fields = self._attach(fields, SKILL_IMAGE, image)
        return self._call("PUT", f"skills/{skill_id}", json=fields)["skill"]

    def delete_skill(self, skill_id: str) -> dict:
        return self._call("DELETE", f"skills/{skill_id}")["skill"]
