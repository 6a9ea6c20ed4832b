"""
Post Routes (feed)

POST /posts - Create post
GET /posts - Feed, newest first
POST /posts/ai-suggestions - Draft posts for a keyword
POST /posts/enhance - Polish a draft
GET /posts/{post_id} - Get post
PATCH /posts/{post_id} - Edit own post
DELETE /posts/{post_id} - Delete own post
POST|DELETE /posts/{post_id}/like (alias /reaction) - Like / unlike
GET /posts/{post_id}/likes (alias /reactions) - Likes on a post
POST|DELETE /posts/{post_id}/repost - Repost / undo repost
GET /posts/{post_id}/reposts - Reposts of a post
POST|GET /posts/{post_id}/comments - Comment / list comments
GET /trending/topics - Top hashtags across posts
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from loguru import logger

from harmony.core.auth import get_current_user
from harmony.models import Like, Post, Repost, User
from harmony.schemas.schemas import (
    CommentCreate, CommentWithUser, EnhanceRequest, EnhanceResponse,
    MessageResponse, PostCreate, PostUpdate, SuggestionRequest,
    SuggestionsResponse, TrendingTopic, UserSummary,
)
from harmony.services.ai_post_suggestions import enhance_post, generate_post_suggestions
from harmony.services.trending_service import trending_topics
from harmony.storage import IStorage, get_storage

router = APIRouter(prefix="/posts", tags=["Posts"])
trending_router = APIRouter(prefix="/trending", tags=["Posts"])


def get_post_or_404(storage: IStorage, post_id: int) -> Post:
    post = storage.get_post(post_id)
    if post is None:
        raise HTTPException(status_code=404, detail="Post not found")
    return post


def get_own_post(storage: IStorage, post_id: int, user: User) -> Post:
    post = get_post_or_404(storage, post_id)
    if post.user_id != user.id:
        raise HTTPException(status_code=403, detail="You can only modify your own posts")
    return post


@router.post("", response_model=Post, status_code=201)
async def create_post(body: PostCreate, user: User = Depends(get_current_user),
                      storage: IStorage = Depends(get_storage)):
    if body.community_id is not None and storage.get_community(body.community_id) is None:
        raise HTTPException(status_code=404, detail="Community not found")
    return storage.create_post({**body.model_dump(), "user_id": user.id})


@router.get("", response_model=List[Post])
async def list_posts(storage: IStorage = Depends(get_storage)):
    return storage.list_posts()


@router.post("/ai-suggestions", response_model=SuggestionsResponse)
async def ai_suggestions(body: SuggestionRequest, user: User = Depends(get_current_user)):
    """Generate three post drafts for a keyword (templates when AI is unavailable)."""
    return {"suggestions": generate_post_suggestions(body.keyword.strip(), user)}


@router.post("/enhance", response_model=EnhanceResponse)
async def enhance(body: EnhanceRequest, user: User = Depends(get_current_user)):
    return enhance_post(body.content, user)


@router.get("/{post_id}", response_model=Post)
async def get_post(post_id: int, storage: IStorage = Depends(get_storage)):
    return get_post_or_404(storage, post_id)


@router.patch("/{post_id}", response_model=Post)
async def update_post(post_id: int, body: PostUpdate, user: User = Depends(get_current_user),
                      storage: IStorage = Depends(get_storage)):
    get_own_post(storage, post_id, user)
    return storage.update_post(post_id, {"content": body.content})


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(post_id: int, user: User = Depends(get_current_user),
                      storage: IStorage = Depends(get_storage)):
    get_own_post(storage, post_id, user)
    storage.delete_post(post_id)
    logger.info(f"User {user.id} deleted post {post_id}")
    return MessageResponse(message="Post deleted")


# ============================================================
# LIKES
# ============================================================

@router.post("/{post_id}/like", response_model=Like, status_code=201)
@router.post("/{post_id}/reaction", response_model=Like, status_code=201, include_in_schema=False)
async def like_post(post_id: int, user: User = Depends(get_current_user),
                    storage: IStorage = Depends(get_storage)):
    """Like a post. Liking twice returns the existing like."""
    get_post_or_404(storage, post_id)
    return storage.add_like(user.id, post_id)


@router.delete("/{post_id}/like", status_code=204)
@router.delete("/{post_id}/reaction", status_code=204, include_in_schema=False)
async def unlike_post(post_id: int, user: User = Depends(get_current_user),
                      storage: IStorage = Depends(get_storage)):
    if not storage.remove_like(user.id, post_id):
        raise HTTPException(status_code=404, detail="Like not found")
    return Response(status_code=204)


@router.get("/{post_id}/likes", response_model=List[Like])
@router.get("/{post_id}/reactions", response_model=List[Like], include_in_schema=False)
async def list_likes(post_id: int, storage: IStorage = Depends(get_storage)):
    get_post_or_404(storage, post_id)
    return storage.list_likes(post_id)


# ============================================================
# REPOSTS
# ============================================================

@router.post("/{post_id}/repost", response_model=Post, status_code=201)
async def repost(post_id: int, user: User = Depends(get_current_user),
                 storage: IStorage = Depends(get_storage)):
    """Repost to the caller's feed. Returns the new post."""
    get_post_or_404(storage, post_id)
    if storage.get_repost(user.id, post_id):
        raise HTTPException(status_code=400, detail="You have already reposted this post")
    return storage.create_repost(user.id, post_id)


@router.delete("/{post_id}/repost", status_code=204)
async def undo_repost(post_id: int, user: User = Depends(get_current_user),
                      storage: IStorage = Depends(get_storage)):
    if not storage.delete_repost(user.id, post_id):
        raise HTTPException(status_code=404, detail="Repost not found")
    return Response(status_code=204)


@router.get("/{post_id}/reposts", response_model=List[Repost])
async def list_reposts(post_id: int, storage: IStorage = Depends(get_storage)):
    get_post_or_404(storage, post_id)
    return storage.list_reposts(post_id)


# ============================================================
# COMMENTS
# ============================================================

@router.post("/{post_id}/comments", response_model=CommentWithUser, status_code=201)
async def add_comment(post_id: int, body: CommentCreate, user: User = Depends(get_current_user),
                      storage: IStorage = Depends(get_storage)):
    get_post_or_404(storage, post_id)
    comment = storage.create_comment({"post_id": post_id, "user_id": user.id, "content": body.content})
    return CommentWithUser(comment=comment, user=UserSummary.model_validate(user))


@router.get("/{post_id}/comments", response_model=List[CommentWithUser])
async def list_comments(post_id: int, storage: IStorage = Depends(get_storage)):
    """Comments oldest first, each with its author."""
    get_post_or_404(storage, post_id)
    results = []
    for comment in storage.list_comments(post_id):
        author = storage.get_user(comment.user_id)
        results.append(CommentWithUser(
            comment=comment,
            user=UserSummary.model_validate(author) if author else None
        ))
    return results


@trending_router.get("/topics", response_model=List[TrendingTopic])
async def get_trending_topics(storage: IStorage = Depends(get_storage)):
    return trending_topics(storage.list_posts())
