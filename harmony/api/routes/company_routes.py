"""
Company Routes

GET /companies - List companies
POST /companies - Create company (caller becomes owner)
GET /companies/{company_id} - Get company
PATCH /companies/{company_id} - Update (owner only)
DELETE /companies/{company_id} - Delete (owner only)
POST /companies/{company_id}/logo - Upload logo (owner only)
GET /companies/{company_id}/posts - Posts published as the company
POST /companies/{company_id}/posts - Publish as the company (owner only)
GET /companies/{company_id}/jobs - Jobs linked to the company
GET /user/companies - Caller's companies
"""

from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile
from loguru import logger

from harmony.core.auth import get_current_user
from harmony.models import Company, Job, Post, User
from harmony.schemas.schemas import CompanyCreate, CompanyPostCreate, CompanyUpdate
from harmony.storage import IStorage, get_storage
from harmony.utils.file_upload import delete_upload, save_image

router = APIRouter(prefix="/companies", tags=["Companies"])
user_companies_router = APIRouter(prefix="/user", tags=["Companies"])


def get_company_or_404(storage: IStorage, company_id: int) -> Company:
    company = storage.get_company(company_id)
    if company is None:
        raise HTTPException(status_code=404, detail="Company not found")
    return company


def get_own_company(storage: IStorage, company_id: int, user: User) -> Company:
    company = get_company_or_404(storage, company_id)
    if company.owner_id != user.id:
        raise HTTPException(status_code=403, detail="Only the company owner can do this")
    return company


@router.get("", response_model=List[Company])
async def list_companies(storage: IStorage = Depends(get_storage)):
    return storage.list_companies()


@router.post("", response_model=Company, status_code=201)
async def create_company(body: CompanyCreate, user: User = Depends(get_current_user),
                         storage: IStorage = Depends(get_storage)):
    company = storage.create_company({**body.model_dump(), "owner_id": user.id})
    logger.info(f"User {user.id} created company {company.id}")
    return company


@router.get("/{company_id}", response_model=Company)
async def get_company(company_id: int, storage: IStorage = Depends(get_storage)):
    return get_company_or_404(storage, company_id)


@router.patch("/{company_id}", response_model=Company)
async def update_company(company_id: int, body: CompanyUpdate, user: User = Depends(get_current_user),
                         storage: IStorage = Depends(get_storage)):
    get_own_company(storage, company_id, user)
    return storage.update_company(company_id, body.model_dump(exclude_unset=True))


@router.delete("/{company_id}", status_code=204)
async def delete_company(company_id: int, user: User = Depends(get_current_user),
                         storage: IStorage = Depends(get_storage)):
    company = get_own_company(storage, company_id, user)
    storage.delete_company(company_id)
    delete_upload(company.logo_url)
    return Response(status_code=204)


@router.post("/{company_id}/logo")
async def upload_logo(company_id: int, file: UploadFile = File(...), user: User = Depends(get_current_user),
                      storage: IStorage = Depends(get_storage)):
    company = get_own_company(storage, company_id, user)
    url = await save_image(file, prefix="logo")
    updated = storage.update_company(company_id, {"logo_url": url})
    delete_upload(company.logo_url)
    return {"logo_url": url, "company": updated}


@router.get("/{company_id}/posts", response_model=List[Post])
async def company_posts(company_id: int, storage: IStorage = Depends(get_storage)):
    get_company_or_404(storage, company_id)
    return storage.list_posts_by_company(company_id)


@router.post("/{company_id}/posts", response_model=Post, status_code=201)
async def create_company_post(company_id: int, body: CompanyPostCreate, user: User = Depends(get_current_user),
                              storage: IStorage = Depends(get_storage)):
    get_own_company(storage, company_id, user)
    return storage.create_post({
        "user_id": user.id,
        "content": body.content,
        "image_url": body.image_url,
        "company_id": company_id,
    })


@router.get("/{company_id}/jobs", response_model=List[Job])
async def company_jobs(company_id: int, storage: IStorage = Depends(get_storage)):
    get_company_or_404(storage, company_id)
    return storage.list_jobs_by_company(company_id)


@user_companies_router.get("/companies", response_model=List[Company])
async def my_companies(user: User = Depends(get_current_user), storage: IStorage = Depends(get_storage)):
    return storage.list_companies_by_owner(user.id)
