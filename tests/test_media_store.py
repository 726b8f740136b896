"""Tests for the Cloudinary media store adapter."""

import hashlib

import pytest

from core.errors import BadRequestError, MediaStoreNotConfigured, UpstreamError
from services.media_store import MB, MediaStore, api_sign_request, check_media_file


def sha1(text: str) -> str:
    return hashlib.sha1(text.encode("utf-8")).hexdigest()


class TestSigning:
    def test_params_sorted_and_excluded(self):
        params = {
            "timestamp": 1700000000,
            "folder": "project-videos",
            "resource_type": "video",
            "api_key": "key123",
            "cloud_name": "demo",
            "file": "ignored",
        }
        expected = sha1("folder=project-videos&timestamp=1700000000secret456")
        assert api_sign_request(params, "secret456") == expected

    def test_empty_values_skipped(self):
        assert api_sign_request({"folder": "", "timestamp": 5}, "s") == sha1("timestamp=5s")

    def test_sign_upload(self, media_store):
        sig = media_store.sign_upload("project-videos", "video", timestamp=1700000000)
        assert sig.signature == sha1("folder=project-videos&timestamp=1700000000secret456")
        assert sig.as_dict() == {
            "signature": sig.signature,
            "timestamp": 1700000000,
            "folder": "project-videos",
            "resource_type": "video",
            "api_key": "key123",
            "cloud_name": "demo",
        }

    def test_sign_upload_requires_credentials(self):
        with pytest.raises(MediaStoreNotConfigured):
            MediaStore(cloud_name="demo").sign_upload("x", "image")


class TestFileChecks:
    def test_video_accepted(self):
        check_media_file("video", "demo.mov", "video/quicktime", 10 * MB)

    def test_image_accepted(self):
        check_media_file("image", "shot.JPG", "image/jpeg", 1024)

    @pytest.mark.parametrize("filename,content_type", [
        ("demo.exe", "video/mp4"),
        ("demo.mp4", "text/plain"),
        ("demo", "video/mp4"),
    ])
    def test_video_rejected(self, filename, content_type):
        with pytest.raises(BadRequestError, match="Only video files are allowed"):
            check_media_file("video", filename, content_type, 1024)

    def test_image_too_large(self):
        with pytest.raises(BadRequestError, match="10MB"):
            check_media_file("image", "big.png", "image/png", 10 * MB + 1)

    def test_video_size_ceiling(self):
        check_media_file("video", "big.mp4", "video/mp4", 100 * MB)
        with pytest.raises(BadRequestError):
            check_media_file("video", "big.mp4", "video/mp4", 100 * MB + 1)


class TestUpload:
    def test_upload_video_signed(self, media_store, cloudinary):
        asset = media_store.upload_video(b"\x00\x01", "clip.mp4", "video/mp4")

        assert asset.public_id == "project-videos/asset1"
        assert asset.url.startswith("https://res.cloudinary.com/demo/video/upload/")
        call = cloudinary.uploads[0]
        assert call["url"] == "https://api.cloudinary.com/v1_1/demo/video/upload"
        data = call["data"]
        assert data["api_key"] == "key123"
        assert data["signature"] == sha1(f"folder=project-videos&timestamp={data['timestamp']}secret456")

    def test_upload_rejected_by_cloudinary(self, media_store, cloudinary):
        cloudinary.fail_upload = True
        with pytest.raises(UpstreamError, match="Invalid image file"):
            media_store.upload_image(b"x", "a.png", "image/png")

    def test_upload_without_public_id(self, media_store, cloudinary):
        cloudinary.upload_body = {"error": "weird"}
        with pytest.raises(UpstreamError, match="unexpected response"):
            media_store.upload_image(b"x", "a.png", "image/png")

    def test_invalid_file_never_reaches_cloudinary(self, media_store, cloudinary):
        with pytest.raises(BadRequestError):
            media_store.upload_image(b"x", "a.txt", "text/plain")
        assert cloudinary.calls == []


class TestDelete:
    def test_delete_ok(self, media_store, cloudinary):
        result = media_store.delete_asset("project-videos/a", "video")
        assert result.ok
        assert cloudinary.calls[0]["url"] == "https://api.cloudinary.com/v1_1/demo/video/destroy"
        assert cloudinary.destroyed == ["project-videos/a"]

    def test_delete_failure_reported_not_raised(self, media_store, cloudinary):
        cloudinary.fail_destroy = True
        result = media_store.delete_asset("project-videos/a", "video")
        assert not result.ok
        assert "unreachable" in result.reason

    def test_delete_not_found_result(self, media_store, cloudinary, monkeypatch):
        class NotFound:
            status_code = 200

            def json(self):
                return {"result": "not found"}

        monkeypatch.setattr(cloudinary, "post", lambda *a, **kw: NotFound())
        result = media_store.delete_asset("gone", "image")
        assert not result.ok
        assert result.reason == "not found"

    def test_delete_without_credentials(self, cloudinary):
        store = MediaStore(http=cloudinary)
        result = store.delete_asset("a", "image")
        assert not result.ok
        assert cloudinary.calls == []


class TestConfig:
    def test_public_config(self, media_store):
        assert media_store.public_config() == {"cloudName": "demo", "uploadPreset": "portfolio_unsigned"}

    def test_ping(self, media_store):
        assert media_store.ping()
        assert not MediaStore().ping()
