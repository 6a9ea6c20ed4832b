"""
Tests for Digital CV upload, tips and removal
"""
import io

from harmony.services.ai_analysis import DEFAULT_TIPS, fallback_analysis


def upload(client, name="cv.mp4", content_type="video/mp4", data=b"fake video bytes"):
    return client.post("/api/digital-cv/upload",
                       files={"video": (name, io.BytesIO(data), content_type)})


class TestDigitalCV:

    def test_upload_returns_static_analysis(self, seeker, upload_dir):
        client, me = seeker
        response = upload(client)
        assert response.status_code == 200
        body = response.json()
        assert body["analysis"] == fallback_analysis()
        assert body["video_url"].startswith(f"/uploads/cv-{me['id']}-")
        assert (upload_dir / body["video_url"].rsplit("/", 1)[1]).exists()
        assert client.get("/api/user").json()["digital_cv_url"] == body["video_url"]

    def test_reupload_replaces_previous_file(self, seeker, upload_dir):
        client, _ = seeker
        first = upload(client).json()["video_url"]
        second = upload(client, name="cv.webm", content_type="video/webm").json()["video_url"]
        assert second.endswith(".webm")
        assert not (upload_dir / first.rsplit("/", 1)[1]).exists()
        assert (upload_dir / second.rsplit("/", 1)[1]).exists()

    def test_non_video_is_400(self, seeker):
        client, _ = seeker
        assert upload(client, name="cv.pdf", content_type="application/pdf").status_code == 400

    def test_empty_file_is_400(self, seeker):
        client, _ = seeker
        assert upload(client, data=b"").status_code == 400

    def test_requires_login(self, client):
        assert upload(client).status_code == 401

    def test_analysis_tips(self, seeker):
        client, _ = seeker
        assert client.get("/api/digital-cv/analysis").status_code == 404
        url = upload(client).json()["video_url"]
        body = client.get("/api/digital-cv/analysis").json()
        assert body == {"tips": DEFAULT_TIPS, "has_digital_cv": True, "cv_url": url}

    def test_delete(self, seeker, upload_dir):
        client, _ = seeker
        url = upload(client).json()["video_url"]
        assert client.delete("/api/digital-cv").status_code == 200
        assert client.get("/api/user").json()["digital_cv_url"] is None
        assert not (upload_dir / url.rsplit("/", 1)[1]).exists()
        assert client.delete("/api/digital-cv").status_code == 404

    def test_stats_count_cv_views(self, seeker):
        client, me = seeker
        upload(client)
        stats = client.get(f"/api/users/{me['id']}/stats").json()
        assert stats["digital_cv_views"] == 10
        assert stats["profile_strength"] == 80
