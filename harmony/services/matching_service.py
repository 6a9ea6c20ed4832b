"""
Job Matching Service

PURPOSE:
Rank open jobs for a user by combining two signals:
1. Skill overlap: share of the job's listed skills the user has
2. Text similarity: cosine similarity of hashed bag-of-words vectors
   built from the user's profile and the job posting

No external calls; vectors are computed on the fly per request.
"""

import hashlib
import re
from typing import List, Optional

import numpy as np

from harmony.models import Job, User

EMBEDDING_DIM = 256
SKILL_WEIGHT = 0.6
SIMILARITY_WEIGHT = 0.4

_WORD_RE = re.compile(r"[a-z0-9+#.]+")


# ============================================================
# EMBEDDINGS
# ============================================================

def _tokenize(text: str) -> List[str]:
    return [w.strip(".") for w in _WORD_RE.findall(text.lower()) if w.strip(".")]


def text_embedding(text: str, dim: int = EMBEDDING_DIM) -> np.ndarray:
    """
    Hash each word into one of `dim` buckets and L2-normalize.
    Deterministic across processes (sha256, not Python's hash()).
    """
    vector = np.zeros(dim)
    for word in _tokenize(text):
        digest = hashlib.sha256(word.encode()).digest()
        vector[int.from_bytes(digest[:4], "big") % dim] += 1.0

    magnitude = np.linalg.norm(vector)
    if magnitude > 0:
        vector = vector / magnitude
    return vector


def cosine_similarity(vec1, vec2) -> float:
    """
    Compute cosine similarity between two vectors.

    Returns:
        Float between -1 and 1 (1 = identical, 0 = orthogonal, -1 = opposite)
    """
    a = np.asarray(vec1, dtype=float)
    b = np.asarray(vec2, dtype=float)
    if a.shape != b.shape:
        raise ValueError("Vectors must have same dimension")

    magnitude_a = np.linalg.norm(a)
    magnitude_b = np.linalg.norm(b)
    if magnitude_a == 0 or magnitude_b == 0:
        return 0.0

    return float(np.dot(a, b) / (magnitude_a * magnitude_b))


def profile_text(user: User) -> str:
    parts = [user.title or "", " ".join(user.skills), user.bio or "", user.industry or ""]
    return " ".join(p for p in parts if p)


def job_text(job: Job) -> str:
    return " ".join([job.title, " ".join(job.skills), job.description])


# ============================================================
# SKILL MATCHING
# ============================================================

def matched_skills(user_skills: List[str], required_skills: List[str]) -> List[str]:
    """Required skills the user has, in the job's order (case-insensitive)."""
    have = {s.strip().lower() for s in user_skills}
    return [s for s in required_skills if s.strip().lower() in have]


def compute_skill_match_percentage(
    user_skills: List[str],
    required_skills: List[str]
) -> float:
    """
    Compute percentage of required skills that the user has.

    Uses case-insensitive matching.

    Returns:
        Float between 0 and 100
    """
    if not required_skills:
        return 100.0  # No requirements = 100% match

    user_skills_lower = {s.strip().lower() for s in user_skills}
    required_skills_lower = {s.strip().lower() for s in required_skills}

    matches = user_skills_lower.intersection(required_skills_lower)

    return (len(matches) / len(required_skills_lower)) * 100


# ============================================================
# RECOMMENDATION
# ============================================================

def score_job(user: User, job: Job, user_vector: Optional[np.ndarray] = None) -> dict:
    """Score a single job for a user."""
    if user_vector is None:
        user_vector = text_embedding(profile_text(user))

    skill_pct = compute_skill_match_percentage(user.skills, job.skills)
    similarity = max(0.0, cosine_similarity(user_vector, text_embedding(job_text(job))))
    match = round(100 * (SKILL_WEIGHT * skill_pct / 100 + SIMILARITY_WEIGHT * similarity))

    return {
        "job": job,
        "match_percentage": int(match),
        "skill_match_pct": round(skill_pct, 1),
        "matched_skills": matched_skills(user.skills, job.skills),
    }


def recommend_jobs(user: User, jobs: List[Job], top_n: int = 10) -> List[dict]:
    """
    Rank jobs for a user, best match first.
    Jobs the user posted themselves are skipped.
    """
    user_vector = text_embedding(profile_text(user))
    scored = [score_job(user, job, user_vector) for job in jobs if job.user_id != user.id]
    scored.sort(key=lambda r: (r["match_percentage"], r["skill_match_pct"]), reverse=True)
    return scored[:top_n]
