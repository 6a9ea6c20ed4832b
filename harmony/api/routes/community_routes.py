"""
Community Routes

POST /communities - Create community (creator joins as admin)
GET /communities - List communities
GET /communities/{community_id} - Get community
POST /communities/{community_id}/join - Join
DELETE /communities/{community_id}/leave - Leave
GET /communities/{community_id}/members - Member profiles
GET /communities/{community_id}/posts - Posts in the community
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from loguru import logger

from harmony.core.auth import get_current_user
from harmony.models import Community, CommunityRole, Post, User
from harmony.schemas.schemas import CommunityCreate, MessageResponse, UserSummary
from harmony.storage import IStorage, get_storage

router = APIRouter(prefix="/communities", tags=["Communities"])


def get_community_or_404(storage: IStorage, community_id: int) -> Community:
    community = storage.get_community(community_id)
    if community is None:
        raise HTTPException(status_code=404, detail="Community not found")
    return community


@router.post("", response_model=Community, status_code=201)
async def create_community(body: CommunityCreate, user: User = Depends(get_current_user),
                           storage: IStorage = Depends(get_storage)):
    """
    Create a community.

    The creator becomes its admin; initial participants that exist are
    added as members. member_count reflects the memberships created.
    """
    if storage.get_community_by_name(body.name):
        raise HTTPException(status_code=400, detail="A community with this name already exists")

    community = storage.create_community({
        "name": body.name,
        "description": body.description,
        "is_private": body.is_private,
        "invite_only": body.invite_only,
        "created_by": user.id,
    })
    storage.add_member(community.id, user.id, role=CommunityRole.admin.value)

    for participant_id in dict.fromkeys(body.initial_participants):
        if participant_id == user.id:
            continue
        if storage.get_user(participant_id) is None:
            logger.warning(f"Skipping unknown participant {participant_id} for community {community.id}")
            continue
        storage.add_member(community.id, participant_id, is_invited=True)

    return storage.get_community(community.id)


@router.get("", response_model=List[Community])
async def list_communities(storage: IStorage = Depends(get_storage)):
    return storage.list_communities()


@router.get("/{community_id}", response_model=Community)
async def get_community(community_id: int, storage: IStorage = Depends(get_storage)):
    return get_community_or_404(storage, community_id)


@router.post("/{community_id}/join", status_code=204)
async def join_community(community_id: int, user: User = Depends(get_current_user),
                         storage: IStorage = Depends(get_storage)):
    if community_id <= 0:
        raise HTTPException(status_code=400, detail="Invalid community ID")
    get_community_or_404(storage, community_id)
    if storage.is_member(community_id, user.id):
        raise HTTPException(status_code=400, detail="Already a member of this community")

    storage.add_member(community_id, user.id)
    return Response(status_code=204)


@router.delete("/{community_id}/leave", response_model=MessageResponse)
async def leave_community(community_id: int, user: User = Depends(get_current_user),
                          storage: IStorage = Depends(get_storage)):
    get_community_or_404(storage, community_id)
    if not storage.remove_member(community_id, user.id):
        raise HTTPException(status_code=404, detail="Not a member of this community")
    return MessageResponse(message="Left community")


@router.get("/{community_id}/members", response_model=List[UserSummary])
async def list_members(community_id: int, storage: IStorage = Depends(get_storage)):
    get_community_or_404(storage, community_id)
    return storage.list_members(community_id)


@router.get("/{community_id}/posts", response_model=List[Post])
async def community_posts(community_id: int, storage: IStorage = Depends(get_storage)):
    get_community_or_404(storage, community_id)
    return storage.list_posts_by_community(community_id)
