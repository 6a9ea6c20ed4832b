"""
Message Routes

POST /messages - Send a direct message
GET /messages - Inbox, newest first, with sender
GET /messages/unread-count - Number of unread messages
GET /messages/{user_id} - Conversation with a user, oldest first (marks it read)
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from harmony.core.auth import get_current_user
from harmony.models import Message, User
from harmony.schemas.schemas import MessageCreate, MessageWithSender, UnreadCount, UserSummary
from harmony.storage import IStorage, get_storage

router = APIRouter(prefix="/messages", tags=["Messages"])


@router.post("", response_model=Message, status_code=201)
async def send_message(body: MessageCreate, user: User = Depends(get_current_user),
                       storage: IStorage = Depends(get_storage)):
    if body.receiver_id == user.id:
        raise HTTPException(status_code=400, detail="You cannot message yourself")
    if storage.get_user(body.receiver_id) is None:
        raise HTTPException(status_code=404, detail="Recipient not found")

    return storage.create_message({
        "sender_id": user.id,
        "receiver_id": body.receiver_id,
        "content": body.content,
    })


@router.get("", response_model=List[MessageWithSender])
async def inbox(user: User = Depends(get_current_user), storage: IStorage = Depends(get_storage)):
    results = []
    for message in storage.list_received_messages(user.id):
        sender = storage.get_user(message.sender_id)
        results.append(MessageWithSender(
            message=message,
            sender=UserSummary.model_validate(sender) if sender else None
        ))
    return results


@router.get("/unread-count", response_model=UnreadCount)
async def unread_count(user: User = Depends(get_current_user), storage: IStorage = Depends(get_storage)):
    return UnreadCount(count=storage.count_unread(user.id))


@router.get("/{user_id}", response_model=List[Message])
async def conversation(user_id: int, user: User = Depends(get_current_user),
                       storage: IStorage = Depends(get_storage)):
    if storage.get_user(user_id) is None:
        raise HTTPException(status_code=404, detail="User not found")

    storage.mark_conversation_read(user.id, user_id)
    return storage.get_conversation(user.id, user_id)
