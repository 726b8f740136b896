"""Tests for /api/skills endpoints."""

import uuid

SKILL = {
    "name": "Backend",
    "topics": ["Python", "PostgreSQL"],
    "imageUrl": "https://res.cloudinary.com/demo/image/upload/skill-images/backend",
    "imagePublicId": "skill-images/backend",
}


def create_skill(client, **extra) -> dict:
    response = client.post("/api/skills", json={**SKILL, **extra})
    assert response.status_code == 201, response.text
    return response.json()["skill"]


class TestSkillReads:
    def test_list(self, auth_client):
        create_skill(auth_client)
        body = auth_client.get("/api/skills").json()
        assert body["success"] is True
        assert body["count"] == 1
        assert body["skills"][0]["name"] == "Backend"

    def test_get_one(self, auth_client):
        skill = create_skill(auth_client)
        body = auth_client.get(f"/api/skills/{skill['id']}").json()
        assert body["skill"]["topics"] == SKILL["topics"]

    def test_get_unknown_and_malformed(self, client):
        assert client.get(f"/api/skills/{uuid.uuid4()}").status_code == 404
        assert client.get("/api/skills/xyz").status_code == 400


class TestSkillCreate:
    def test_empty_topics(self, auth_client):
        response = auth_client.post("/api/skills", json={**SKILL, "topics": []})
        assert response.status_code == 400
        assert "topics" in response.json()["errors"]

    def test_image_required(self, auth_client):
        response = auth_client.post("/api/skills", json={"name": "Frontend", "topics": ["React"]})
        assert response.status_code == 400
        errors = response.json()["errors"]
        assert "imageUrl" in errors
        assert "imagePublicId" in errors

    def test_multipart_with_image_file(self, auth_client, cloudinary):
        response = auth_client.post(
            "/api/skills",
            data={"name": "DevOps", "topics[1]": "Kubernetes", "topics[0]": "Docker"},
            files={"image": ("devops.webp", b"RIFF", "image/webp")},
        )
        assert response.status_code == 201, response.text
        skill = response.json()["skill"]
        assert skill["topics"] == ["Docker", "Kubernetes"]
        assert skill["imagePublicId"] == "skill-images/asset1"
        assert cloudinary.uploads[0]["url"].endswith("/image/upload")

    def test_requires_auth(self, client):
        assert client.post("/api/skills", json=SKILL).status_code == 401


class TestSkillUpdateDelete:
    def test_replace_image_deletes_old(self, auth_client, cloudinary):
        skill = create_skill(auth_client)
        response = auth_client.put(
            f"/api/skills/{skill['id']}",
            json={"imageUrl": "https://res.cloudinary.com/demo/image/upload/skill-images/new", "imagePublicId": "skill-images/new"},
        )
        assert response.status_code == 200
        assert response.json()["skill"]["imagePublicId"] == "skill-images/new"
        assert cloudinary.destroyed == ["skill-images/backend"]

    def test_removing_required_image_rejected(self, auth_client, cloudinary):
        skill = create_skill(auth_client)
        response = auth_client.put(f"/api/skills/{skill['id']}", json={"removeImage": True})
        assert response.status_code == 400
        assert "imageUrl" in response.json()["errors"]
        assert cloudinary.destroyed == []

    def test_update_topics_only(self, auth_client, cloudinary):
        skill = create_skill(auth_client)
        response = auth_client.put(f"/api/skills/{skill['id']}", json={"topics": "Python"})
        assert response.status_code == 200
        assert response.json()["skill"]["topics"] == ["Python"]
        assert cloudinary.destroyed == []

    def test_delete_cascades_image(self, auth_client, cloudinary):
        skill = create_skill(auth_client)
        response = auth_client.delete(f"/api/skills/{skill['id']}")
        assert response.status_code == 200
        assert response.json()["skill"]["id"] == skill["id"]
        assert cloudinary.destroyed == ["skill-images/backend"]
        assert auth_client.get(f"/api/skills/{skill['id']}").status_code == 404
