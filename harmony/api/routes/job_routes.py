"""
Job Routes

POST /jobs - Create job posting (recruiter only)
GET /jobs - List jobs with optional search/location/skill filters
GET /jobs/saved - Caller's saved jobs
GET /jobs/applied - Caller's applications with jobs (job seekers only)
GET /jobs/recommended - Jobs ranked by profile match
GET /jobs/{job_id} - Get job details
PATCH /jobs/{job_id} - Update job (poster only)
DELETE /jobs/{job_id} - Delete job (poster only)
POST|DELETE /jobs/{job_id}/save - Save / unsave
GET /jobs/{job_id}/saved - Whether the caller saved the job
POST /jobs/{job_id}/apply - Apply to job (job seekers only)

GET /applications - Recruiter: applications to own jobs; seeker: own applications
PATCH /applications/{application_id}/status - Update status (job poster only)
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from loguru import logger

from harmony.core.auth import get_current_recruiter, get_current_user
from harmony.models import ApplicationStatus, Job, JobApplication, SavedJob, User
from harmony.schemas.schemas import (
    ApplicationStatusUpdate, ApplicationWithApplicant, ApplicationWithJob,
    ApplyRequest, JobCreate, JobUpdate, MessageResponse, RecommendedJob,
    SavedStatus, UserSummary,
)
from harmony.services.matching_service import recommend_jobs
from harmony.storage import IStorage, get_storage

router = APIRouter(prefix="/jobs", tags=["Jobs"])
applications_router = APIRouter(prefix="/applications", tags=["Applications"])


def get_job_or_404(storage: IStorage, job_id: int) -> Job:
    job = storage.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")
    return job


def get_own_job(storage: IStorage, job_id: int, user: User) -> Job:
    job = get_job_or_404(storage, job_id)
    if job.user_id != user.id:
        raise HTTPException(status_code=403, detail="You can only modify your own job postings")
    return job


def parse_skills(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [s.strip() for s in raw.split(",") if s.strip()]


def merge_skills(existing: List[str], new: List[str]) -> List[str]:
    """Append new skills not already present (case-insensitive)."""
    merged = list(existing)
    seen = {s.lower() for s in existing}
    for skill in new:
        if skill.lower() not in seen:
            seen.add(skill.lower())
            merged.append(skill)
    return merged


def job_matches(job: Job, search: Optional[str], location: Optional[str], skill: Optional[str]) -> bool:
    if search:
        needle = search.lower()
        haystack = " ".join([job.title, job.company, job.description]).lower()
        if needle not in haystack:
            return False
    if location and location.lower() not in job.location.lower():
        return False
    if skill and skill.lower() not in {s.lower() for s in job.skills}:
        return False
    return True


@router.post("", response_model=Job, status_code=201)
async def create_job(body: JobCreate, user: User = Depends(get_current_recruiter),
                     storage: IStorage = Depends(get_storage)):
    """Create a new job posting. Only recruiters can create jobs."""
    if body.company_id is not None:
        company = storage.get_company(body.company_id)
        if company is None:
            raise HTTPException(status_code=404, detail="Company not found")
        if company.owner_id != user.id:
            raise HTTPException(status_code=403, detail="You can only post jobs for your own company")

    job = storage.create_job({**body.model_dump(), "user_id": user.id})
    logger.info(f"Recruiter {user.id} posted job {job.id}")
    return job


@router.get("", response_model=List[Job])
async def list_jobs(
    search: Optional[str] = Query(None, description="Search in title, company, description"),
    location: Optional[str] = Query(None),
    skill: Optional[str] = Query(None),
    storage: IStorage = Depends(get_storage)
):
    """List jobs, newest first, with optional case-insensitive filters."""
    return [job for job in storage.list_jobs() if job_matches(job, search, location, skill)]


@router.get("/saved", response_model=List[Job])
async def saved_jobs(user: User = Depends(get_current_user), storage: IStorage = Depends(get_storage)):
    return storage.list_saved_jobs(user.id)


@router.get("/applied", response_model=List[ApplicationWithJob])
async def applied_jobs(user: User = Depends(get_current_user), storage: IStorage = Depends(get_storage)):
    if user.is_recruiter:
        raise HTTPException(status_code=403, detail="Only job seekers have applications")
    return [
        ApplicationWithJob(application=a, job=storage.get_job(a.job_id))
        for a in storage.list_applications_by_applicant(user.id)
    ]


@router.get("/recommended", response_model=List[RecommendedJob])
async def recommended_jobs(
    limit: int = Query(10, ge=1, le=50),
    user: User = Depends(get_current_user),
    storage: IStorage = Depends(get_storage)
):
    """Jobs ranked by skill overlap and profile similarity."""
    return recommend_jobs(user, storage.list_jobs(), top_n=limit)


@router.get("/{job_id}", response_model=Job)
async def get_job(job_id: int, storage: IStorage = Depends(get_storage)):
    return get_job_or_404(storage, job_id)


@router.patch("/{job_id}", response_model=Job)
async def update_job(job_id: int, body: JobUpdate, user: User = Depends(get_current_user),
                     storage: IStorage = Depends(get_storage)):
    get_own_job(storage, job_id, user)
    return storage.update_job(job_id, body.model_dump(exclude_unset=True))


@router.delete("/{job_id}", response_model=MessageResponse)
async def delete_job(job_id: int, user: User = Depends(get_current_user),
                     storage: IStorage = Depends(get_storage)):
    get_own_job(storage, job_id, user)
    storage.delete_job(job_id)
    return MessageResponse(message="Job deleted")


@router.post("/{job_id}/save", response_model=SavedJob, status_code=201)
async def save_job(job_id: int, user: User = Depends(get_current_user),
                   storage: IStorage = Depends(get_storage)):
    get_job_or_404(storage, job_id)
    return storage.save_job(user.id, job_id)


@router.delete("/{job_id}/save", status_code=204)
async def unsave_job(job_id: int, user: User = Depends(get_current_user),
                     storage: IStorage = Depends(get_storage)):
    if not storage.unsave_job(user.id, job_id):
        raise HTTPException(status_code=404, detail="Job not in saved list")
    return Response(status_code=204)


@router.get("/{job_id}/saved", response_model=SavedStatus)
async def is_saved(job_id: int, user: User = Depends(get_current_user),
                   storage: IStorage = Depends(get_storage)):
    return SavedStatus(saved=storage.is_job_saved(user.id, job_id))


@router.post("/{job_id}/apply", response_model=JobApplication, status_code=201)
async def apply_to_job(job_id: int, body: ApplyRequest, user: User = Depends(get_current_user),
                       storage: IStorage = Depends(get_storage)):
    """
    Apply to a job.

    Skills sent with the application are merged into the applicant's profile.
    """
    if user.is_recruiter:
        raise HTTPException(status_code=403, detail="Recruiters cannot apply to jobs")
    get_job_or_404(storage, job_id)
    if storage.get_application_for(job_id, user.id):
        raise HTTPException(status_code=400, detail="You have already applied to this job")

    new_skills = parse_skills(body.skills)
    if new_skills:
        storage.update_user(user.id, {"skills": merge_skills(user.skills, new_skills)})

    application = storage.create_application({
        "job_id": job_id,
        "applicant_id": user.id,
        "status": ApplicationStatus.applied.value,
        "note": body.cover_letter,
    })
    logger.info(f"User {user.id} applied to job {job_id}")
    return application


# ============================================================
# APPLICATIONS
# ============================================================

@applications_router.get("")
async def list_applications(user: User = Depends(get_current_user),
                            storage: IStorage = Depends(get_storage)):
    """
    Recruiters get applications to their jobs with applicant info;
    job seekers get their own applications with job info.
    """
    if user.is_recruiter:
        results = []
        for job in storage.list_jobs_by_user(user.id):
            for application in storage.list_applications_by_job(job.id):
                applicant = storage.get_user(application.applicant_id)
                results.append(ApplicationWithApplicant(
                    application=application,
                    applicant=UserSummary.model_validate(applicant) if applicant else None
                ))
        return results

    return [
        ApplicationWithJob(application=a, job=storage.get_job(a.job_id))
        for a in storage.list_applications_by_applicant(user.id)
    ]


@applications_router.patch("/{application_id}/status", response_model=JobApplication)
async def update_application_status(
    application_id: int,
    body: ApplicationStatusUpdate,
    user: User = Depends(get_current_recruiter),
    storage: IStorage = Depends(get_storage)
):
    application = storage.get_application(application_id)
    if application is None:
        raise HTTPException(status_code=404, detail="Application not found")

    job = storage.get_job(application.job_id)
    if job is None or job.user_id != user.id:
        raise HTTPException(status_code=403, detail="You can only manage applications to your own jobs")

    return storage.update_application_status(application_id, body.status.value)
