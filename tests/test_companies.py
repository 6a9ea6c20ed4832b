"""
Tests for company pages
"""
import io

import pytest


@pytest.fixture
def company(recruiter):
    client, _ = recruiter
    response = client.post("/api/companies", json={"name": "Acme", "industry": "Software"})
    assert response.status_code == 201
    return response.json()


class TestCompanies:

    def test_owner_is_caller(self, recruiter, company, client):
        rita, me = recruiter
        assert company["owner_id"] == me["id"]
        assert [c["id"] for c in rita.get("/api/user/companies").json()] == [company["id"]]
        assert [c["id"] for c in client.get(f"/api/users/{me['id']}/companies").json()] == [company["id"]]

    def test_update_owner_only(self, recruiter, seeker, company):
        rita, _ = recruiter
        alice, _ = seeker
        url = f"/api/companies/{company['id']}"
        assert alice.patch(url, json={"location": "Paris"}).status_code == 403
        assert rita.patch(url, json={"location": "Paris"}).json()["location"] == "Paris"

    def test_null_name_is_400(self, recruiter, company):
        rita, _ = recruiter
        url = f"/api/companies/{company['id']}"
        assert rita.patch(url, json={"name": None}).status_code == 400
        response = rita.patch(url, json={"industry": None})
        assert response.status_code == 200
        assert response.json()["name"] == "Acme"
        assert response.json()["industry"] is None

    def test_company_posts(self, recruiter, seeker, company, client):
        rita, _ = recruiter
        alice, _ = seeker
        url = f"/api/companies/{company['id']}/posts"
        assert alice.post(url, json={"content": "Not mine"}).status_code == 403
        created = rita.post(url, json={"content": "We are hiring"})
        assert created.status_code == 201
        assert created.json()["company_id"] == company["id"]
        assert [p["content"] for p in client.get(url).json()] == ["We are hiring"]

    def test_company_jobs(self, recruiter, company, client):
        rita, _ = recruiter
        rita.post("/api/jobs", json={
            "title": "Engineer", "company": "Acme", "location": "Remote",
            "description": "Build things", "company_id": company["id"],
        })
        jobs = client.get(f"/api/companies/{company['id']}/jobs").json()
        assert [j["title"] for j in jobs] == ["Engineer"]

    def test_logo_upload(self, recruiter, company, upload_dir):
        rita, _ = recruiter
        response = rita.post(
            f"/api/companies/{company['id']}/logo",
            files={"file": ("logo.jpg", io.BytesIO(b"jpeg bytes"), "image/jpeg")},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["company"]["logo_url"] == body["logo_url"]
        assert (upload_dir / body["logo_url"].rsplit("/", 1)[1]).exists()

    def test_delete_detaches_jobs(self, recruiter, company, client, storage):
        rita, _ = recruiter
        job = rita.post("/api/jobs", json={
            "title": "Engineer", "company": "Acme", "location": "Remote",
            "description": "Build things", "company_id": company["id"],
        }).json()
        response = rita.delete(f"/api/companies/{company['id']}")
        assert response.status_code == 204
        assert client.get(f"/api/companies/{company['id']}").status_code == 404
        assert storage.get_job(job["id"]).company_id is None

    def test_unknown_company_is_404(self, client):
        assert client.get("/api/companies/999").status_code == 404
