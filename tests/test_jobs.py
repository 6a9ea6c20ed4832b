"""
Tests for jobs, saved jobs, applications and recommendations
"""
import pytest

JOB = {
    "title": "Python Developer",
    "company": "Acme",
    "location": "Remote",
    "description": "Build FastAPI services",
    "skills": ["Python", "FastAPI", "PostgreSQL"],
}


@pytest.fixture
def job(recruiter):
    client, _ = recruiter
    response = client.post("/api/jobs", json=JOB)
    assert response.status_code == 201
    return response.json()


class TestJobPostings:

    def test_seeker_cannot_post(self, seeker):
        client, _ = seeker
        assert client.post("/api/jobs", json=JOB).status_code == 403

    def test_filters(self, recruiter, job, client):
        rita, _ = recruiter
        rita.post("/api/jobs", json={**JOB, "title": "Data Analyst", "location": "Berlin",
                                     "description": "Dashboards", "skills": ["SQL"]})
        assert len(client.get("/api/jobs").json()) == 2
        assert [j["title"] for j in client.get("/api/jobs", params={"search": "fastapi"}).json()] \
            == ["Python Developer"]
        assert [j["title"] for j in client.get("/api/jobs", params={"location": "berlin"}).json()] \
            == ["Data Analyst"]
        assert [j["title"] for j in client.get("/api/jobs", params={"skill": "sql"}).json()] \
            == ["Data Analyst"]

    def test_update_by_poster_only(self, recruiter, make_user, job):
        rita, _ = recruiter
        response = rita.patch(f"/api/jobs/{job['id']}", json={"salary": "100k"})
        assert response.json()["salary"] == "100k"
        other, _ = make_user("otto", is_recruiter=True)
        assert other.patch(f"/api/jobs/{job['id']}", json={"salary": "1"}).status_code == 403

    @pytest.mark.parametrize("field", ["title", "company", "location", "description", "skills"])
    def test_null_required_field_is_400(self, recruiter, job, client, field):
        rita, _ = recruiter
        assert rita.patch(f"/api/jobs/{job['id']}", json={field: None}).status_code == 400
        assert client.get(f"/api/jobs/{job['id']}").json()[field] == job[field]

    def test_delete(self, recruiter, job, client):
        rita, _ = recruiter
        assert rita.delete(f"/api/jobs/{job['id']}").status_code == 200
        assert client.get(f"/api/jobs/{job['id']}").status_code == 404

    def test_company_must_belong_to_recruiter(self, recruiter, make_user):
        rita, _ = recruiter
        owner, _ = make_user("owen", is_recruiter=True)
        company = owner.post("/api/companies", json={"name": "Owen Inc"}).json()
        response = rita.post("/api/jobs", json={**JOB, "company_id": company["id"]})
        assert response.status_code == 403
        assert rita.post("/api/jobs", json={**JOB, "company_id": 999}).status_code == 404


class TestSavedJobs:

    def test_save_unsave(self, seeker, job):
        client, _ = seeker
        assert client.post(f"/api/jobs/{job['id']}/save").status_code == 201
        assert client.post(f"/api/jobs/{job['id']}/save").status_code == 201
        assert client.get(f"/api/jobs/{job['id']}/saved").json() == {"saved": True}
        assert [j["id"] for j in client.get("/api/jobs/saved").json()] == [job["id"]]

        assert client.delete(f"/api/jobs/{job['id']}/save").status_code == 204
        assert client.get(f"/api/jobs/{job['id']}/saved").json() == {"saved": False}
        assert client.delete(f"/api/jobs/{job['id']}/save").status_code == 404

    def test_save_missing_job_is_404(self, seeker):
        client, _ = seeker
        assert client.post("/api/jobs/999/save").status_code == 404


class TestApplications:

    def test_apply_merges_skills(self, seeker, job, storage):
        client, me = seeker
        response = client.post(f"/api/jobs/{job['id']}/apply",
                               json={"cover_letter": "Hire me", "skills": "python, Docker"})
        assert response.status_code == 201
        application = response.json()
        assert application["status"] == "applied"
        assert application["note"] == "Hire me"
        assert storage.get_user(me["id"]).skills == ["Python", "FastAPI", "Docker"]

    def test_duplicate_application_is_400(self, seeker, job):
        client, _ = seeker
        client.post(f"/api/jobs/{job['id']}/apply", json={})
        assert client.post(f"/api/jobs/{job['id']}/apply", json={}).status_code == 400

    def test_recruiter_cannot_apply(self, recruiter, job):
        client, _ = recruiter
        assert client.post(f"/api/jobs/{job['id']}/apply", json={}).status_code == 403

    def test_apply_missing_job_is_404(self, seeker):
        client, _ = seeker
        assert client.post("/api/jobs/999/apply", json={}).status_code == 404

    def test_applied_and_applications_views(self, seeker, recruiter, job):
        alice, me = seeker
        rita, _ = recruiter
        alice.post(f"/api/jobs/{job['id']}/apply", json={})

        applied = alice.get("/api/jobs/applied").json()
        assert applied[0]["job"]["id"] == job["id"]
        assert alice.get("/api/applications").json()[0]["job"]["title"] == "Python Developer"

        received = rita.get("/api/applications").json()
        assert received[0]["applicant"]["id"] == me["id"]
        assert rita.get("/api/jobs/applied").status_code == 403

    def test_status_update_by_job_owner(self, seeker, recruiter, make_user, job):
        alice, _ = seeker
        rita, _ = recruiter
        application = alice.post(f"/api/jobs/{job['id']}/apply", json={}).json()

        url = f"/api/applications/{application['id']}/status"
        response = rita.patch(url, json={"status": "shortlisted"})
        assert response.status_code == 200
        assert response.json()["status"] == "shortlisted"

        other, _ = make_user("otto", is_recruiter=True)
        assert other.patch(url, json={"status": "hired"}).status_code == 403
        assert rita.patch(url, json={"status": "promoted"}).status_code == 400
        assert rita.patch("/api/applications/999/status", json={"status": "hired"}).status_code == 404


class TestRecommendations:

    def test_best_match_first(self, seeker, recruiter, job):
        rita, _ = recruiter
        rita.post("/api/jobs", json={**JOB, "title": "Nurse", "description": "Ward care",
                                     "skills": ["Patient care"]})
        alice, _ = seeker
        ranked = alice.get("/api/jobs/recommended").json()
        assert ranked[0]["job"]["id"] == job["id"]
        assert ranked[0]["matched_skills"] == ["Python", "FastAPI"]
        assert ranked[0]["match_percentage"] > ranked[1]["match_percentage"]

    def test_own_jobs_skipped(self, recruiter, job):
        rita, _ = recruiter
        assert rita.get("/api/jobs/recommended").json() == []
