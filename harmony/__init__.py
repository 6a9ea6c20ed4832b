"""
Harmony - Professional Networking & Recruiting Platform
Profiles with video Digital CVs, a social feed, jobs, communities and messaging.

Architecture:
- FastAPI: REST API under /api with cookie sessions
- Storage: IStorage interface, in-memory or SQLAlchemy backed
- OpenAI: post suggestions and video-resume feedback (static fallback)
"""

__version__ = "1.0.0"
