"""
AI Post Suggestions

Generates draft posts for a keyword and polishes user-written posts.
Both functions always return a usable result: when the LLM is not
configured or the call fails, static templates are used instead.
"""

import re
from typing import List, Optional

from loguru import logger

from harmony.models import User
from harmony.services.llm_client import LLMClient, get_llm_client

SUGGESTION_SYSTEM_PROMPT = (
    "You write engaging posts for a professional networking site. "
    "Respond with a JSON object only."
)

ENHANCE_SYSTEM_PROMPT = (
    "You improve professional social media posts while keeping their meaning. "
    "Respond with a JSON object only."
)


def _profile_context(user: Optional[User]) -> str:
    if user is None:
        return "The author is a professional looking to share something useful."
    role = user.title or "a professional"
    industry = f" in {user.industry}" if user.industry else ""
    skills = ", ".join(user.skills) if user.skills else "general professional skills"
    return f"The author is {user.name}, working as {role}{industry}. Skills: {skills}."


def _compact(keyword: str) -> str:
    return re.sub(r"\s+", "", keyword)


def fallback_suggestions(keyword: str) -> List[dict]:
    """Three template posts in informative, inspirational and personal tones."""
    tag = _compact(keyword)
    return [
        {
            "title": f"Professional Insights on {keyword}",
            "content": (
                f"Looking at where {keyword} is heading, the pace of change stands out. "
                f"Staying current is part of the job now.\n\n"
                f"The strongest {keyword} work I have seen pairs solid technical depth with good collaboration. "
                f"How are you approaching {keyword} in your current role?"
            ),
            "tone": "informative",
            "hashtags": [tag, "ProfessionalDevelopment", "CareerGrowth", "Networking"],
        },
        {
            "title": f"Why {keyword} Matters More Than Ever",
            "content": (
                f"Challenges around {keyword} are often opportunities in disguise.\n\n"
                f"I have watched a focus on {keyword} change individual careers and whole teams. "
                f"If the pace feels overwhelming, remember every expert started as a beginner.\n\n"
                f"What surprised you most about {keyword} recently?"
            ),
            "tone": "inspirational",
            "hashtags": [tag, "Inspiration", "GrowthMindset", "Leadership"],
        },
        {
            "title": f"My Journey with {keyword}",
            "content": (
                f"My first brush with {keyword} left me lost. Today it is one of my strongest areas.\n\n"
                f"What changed was learning one piece at a time, finding mentors and asking questions early. "
                f"What was your biggest learning moment so far?"
            ),
            "tone": "personal",
            "hashtags": [tag, "PersonalGrowth", "Journey", "Mentorship"],
        },
    ]


def _normalize_suggestion(item: dict) -> Optional[dict]:
    if not isinstance(item, dict) or not item.get("content"):
        return None
    hashtags = item.get("hashtags") or []
    return {
        "title": str(item.get("title") or "Suggested post"),
        "content": str(item["content"]),
        "tone": str(item.get("tone") or "informative"),
        "hashtags": [str(h).lstrip("#") for h in hashtags if h],
    }


def generate_post_suggestions(keyword: str, user: Optional[User] = None,
                              client: Optional[LLMClient] = None) -> List[dict]:
    """
    Generate three post drafts for a keyword.

    Returns:
        List of {title, content, tone, hashtags}
    """
    client = client or get_llm_client()
    if not client.is_configured():
        logger.info("OpenAI key not configured, using template post suggestions")
        return fallback_suggestions(keyword)

    prompt = (
        f"{_profile_context(user)}\n"
        f'Write 3 post drafts about "{keyword}", 100-200 words each, with relevant hashtags. '
        "Use one informative, one inspirational and one personal-story tone.\n"
        'Format: {"suggestions": [{"title": str, "content": str, '
        '"tone": "informative|inspirational|personal", "hashtags": [str]}]}'
    )
    try:
        result = client.complete_json(SUGGESTION_SYSTEM_PROMPT, prompt, max_tokens=1000)
        suggestions = [s for s in map(_normalize_suggestion, result.get("suggestions") or []) if s]
        if suggestions:
            return suggestions
        logger.warning("Model returned no usable suggestions, using templates")
    except Exception as e:
        logger.warning(f"Post suggestion request failed, using templates: {e}")
    return fallback_suggestions(keyword)


def fallback_hashtags(user: Optional[User]) -> List[str]:
    tags = []
    if user is not None:
        if user.industry:
            tags.append(_compact(user.industry))
        tags.extend(_compact(s) for s in user.skills[:3])
    tags.extend(["Professional", "Networking"])

    seen = set()
    unique = []
    for tag in tags:
        if tag and tag.lower() not in seen:
            seen.add(tag.lower())
            unique.append(tag)
    return unique


def enhance_post(content: str, user: Optional[User] = None,
                 client: Optional[LLMClient] = None) -> dict:
    """
    Polish a post draft.

    Returns:
        {enhanced_content, suggested_hashtags}; the original content with
        profile-derived hashtags when the model is unavailable.
    """
    client = client or get_llm_client()
    fallback = {"enhanced_content": content, "suggested_hashtags": fallback_hashtags(user)}
    if not client.is_configured():
        return fallback

    prompt = (
        f"{_profile_context(user)}\n"
        f'Original post: "{content}"\n'
        "Make it more engaging without changing its meaning, stay under 250 words "
        "and suggest professional hashtags.\n"
        'Format: {"enhanced_content": str, "suggested_hashtags": [str]}'
    )
    try:
        result = client.complete_json(ENHANCE_SYSTEM_PROMPT, prompt, max_tokens=800)
    except Exception as e:
        logger.warning(f"Post enhancement failed, returning original content: {e}")
        return fallback

    return {
        "enhanced_content": str(result.get("enhanced_content") or content),
        "suggested_hashtags": [str(h).lstrip("#") for h in result.get("suggested_hashtags") or [] if h]
        or fallback["suggested_hashtags"],
    }
