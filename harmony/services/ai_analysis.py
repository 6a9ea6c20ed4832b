"""
Video Resume Analysis

Feedback on uploaded Digital CVs. The video itself is not processed;
the model sees only file metadata and the owner's profile, and every
function falls back to static feedback when the model is unavailable.
"""

import os
from datetime import datetime, timezone
from typing import List, Optional

from loguru import logger

from harmony.models import User
from harmony.services.llm_client import LLMClient, get_llm_client

ANALYSIS_SYSTEM_PROMPT = (
    "You are an HR consultant reviewing video resumes. Give constructive, "
    "professional feedback as a JSON object."
)

TIPS_SYSTEM_PROMPT = (
    "You are a career coach for video resumes. Give specific, actionable advice "
    "as a JSON object."
)

DEFAULT_TIPS = [
    "Maintain eye contact with the camera",
    "Use a clean, professional background",
    "Practice your elevator pitch before recording",
]


def fallback_analysis() -> dict:
    return {
        "summary": "Professional video resume submitted successfully.",
        "key_strengths": ["Clear communication", "Professional presentation"],
        "improvement_areas": ["Consider improving lighting", "Practice key talking points"],
        "overall_score": 7,
        "feedback": "Great start! Focus on highlighting your unique value proposition.",
    }


def _clamp_score(value) -> int:
    try:
        score = int(round(float(value)))
    except (TypeError, ValueError, OverflowError):
        return fallback_analysis()["overall_score"]
    return max(1, min(10, score))


def _string_list(value, default: List[str]) -> List[str]:
    if isinstance(value, list):
        items = [str(v) for v in value if v]
        if items:
            return items
    return default


def analyze_video_resume(video_path: str, user: Optional[User] = None,
                         client: Optional[LLMClient] = None) -> dict:
    """
    Produce structured feedback for an uploaded video resume.

    Returns:
        {summary, key_strengths, improvement_areas, overall_score, feedback}
    """
    client = client or get_llm_client()
    defaults = fallback_analysis()
    if not client.is_configured():
        logger.info("OpenAI key not configured, using static video analysis")
        return defaults

    try:
        stat = os.stat(video_path)
        uploaded = datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc).isoformat()
        profile = f"Candidate title: {user.title}\n" if user and user.title else ""
        prompt = (
            f"Video file: {os.path.basename(video_path)}\n"
            f"File size: {stat.st_size / (1024 * 1024):.2f} MB\n"
            f"Uploaded: {uploaded}\n{profile}"
            "Using common video resume practice, give a 2-3 sentence summary, strengths, "
            "improvement areas, an overall score from 1 to 10 and constructive feedback.\n"
            'Format: {"summary": str, "key_strengths": [str], "improvement_areas": [str], '
            '"overall_score": int, "feedback": str}'
        )
        result = client.complete_json(ANALYSIS_SYSTEM_PROMPT, prompt, max_tokens=800)
    except Exception as e:
        logger.warning(f"Video resume analysis failed, using static feedback: {e}")
        return defaults

    return {
        "summary": str(result.get("summary") or defaults["summary"]),
        "key_strengths": _string_list(result.get("key_strengths"), defaults["key_strengths"]),
        "improvement_areas": _string_list(result.get("improvement_areas"), defaults["improvement_areas"]),
        "overall_score": _clamp_score(result.get("overall_score", defaults["overall_score"])),
        "feedback": str(result.get("feedback") or defaults["feedback"]),
    }


def generate_personalized_tips(user: User, client: Optional[LLMClient] = None) -> List[str]:
    """3-5 tips for improving the user's video resume."""
    client = client or get_llm_client()
    if not client.is_configured():
        return list(DEFAULT_TIPS)

    prompt = (
        f"Name: {user.name}\n"
        f"Title: {user.title or 'Professional'}\n"
        f"Industry: {user.industry or 'Technology'}\n"
        f"Skills: {', '.join(user.skills) or 'not listed'}\n"
        "Give 3-5 personalised tips for improving this person's video resume.\n"
        'Format: {"tips": [str]}'
    )
    try:
        result = client.complete_json(TIPS_SYSTEM_PROMPT, prompt, max_tokens=500)
    except Exception as e:
        logger.warning(f"Tip generation failed, using defaults: {e}")
        return list(DEFAULT_TIPS)
    return _string_list(result.get("tips"), list(DEFAULT_TIPS))
