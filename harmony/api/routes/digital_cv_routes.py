"""
Digital CV Routes

POST /digital-cv/upload - Upload a video resume and get AI feedback
GET /digital-cv/analysis - Personalised tips for the caller's video resume
DELETE /digital-cv - Remove the caller's video resume
"""

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from loguru import logger

from harmony.core.auth import get_current_user
from harmony.models import User
from harmony.schemas.schemas import DigitalCVTips, DigitalCVUploadResponse, MessageResponse
from harmony.services.ai_analysis import analyze_video_resume, generate_personalized_tips
from harmony.storage import IStorage, get_storage
from harmony.utils.file_upload import delete_upload, save_video, url_to_path

router = APIRouter(prefix="/digital-cv", tags=["Digital CV"])


@router.post("/upload", response_model=DigitalCVUploadResponse)
async def upload_digital_cv(video: UploadFile = File(...), user: User = Depends(get_current_user),
                            storage: IStorage = Depends(get_storage)):
    """
    Store a video resume, replacing any previous one.

    Feedback comes from the LLM when configured, else a static template.
    """
    video_url = await save_video(video, prefix=f"cv-{user.id}")
    previous = user.digital_cv_url

    updated = storage.update_user(user.id, {"digital_cv_url": video_url})
    if previous and previous != video_url:
        delete_upload(previous)

    analysis = analyze_video_resume(url_to_path(video_url), updated)
    logger.info(f"User {user.id} uploaded a Digital CV")
    return DigitalCVUploadResponse(
        message="Digital CV uploaded successfully",
        video_url=video_url,
        analysis=analysis
    )


@router.get("/analysis", response_model=DigitalCVTips)
async def digital_cv_analysis(user: User = Depends(get_current_user)):
    if not user.digital_cv_url:
        raise HTTPException(status_code=404, detail="No Digital CV found")

    return DigitalCVTips(
        tips=generate_personalized_tips(user),
        has_digital_cv=True,
        cv_url=user.digital_cv_url
    )


@router.delete("", response_model=MessageResponse)
async def delete_digital_cv(user: User = Depends(get_current_user), storage: IStorage = Depends(get_storage)):
    if not user.digital_cv_url:
        raise HTTPException(status_code=404, detail="No Digital CV found")

    storage.update_user(user.id, {"digital_cv_url": None})
    delete_upload(user.digital_cv_url)
    return MessageResponse(message="Digital CV deleted")
