"""
Connection Routes

POST /connections - Send a connection request
PATCH /connections/{connection_id} - Accept or reject (receiver only)
GET /connections - Accepted connections with the other user
GET /connections/pending - Requests received
GET /connections/sent-pending - Requests sent
DELETE /connections/{connection_id} - Remove (participants only)
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from harmony.core.auth import get_current_user
from harmony.models import Connection, ConnectionStatus, User
from harmony.schemas.schemas import (
    ConnectionCreate, ConnectionStatusUpdate, ConnectionWithUser, MessageResponse, UserSummary,
)
from harmony.storage import IStorage, get_storage

router = APIRouter(prefix="/connections", tags=["Connections"])


def get_connection_or_404(storage: IStorage, connection_id: int) -> Connection:
    connection = storage.get_connection(connection_id)
    if connection is None:
        raise HTTPException(status_code=404, detail="Connection not found")
    return connection


def with_other_user(storage: IStorage, connections: List[Connection], user_id: int) -> List[ConnectionWithUser]:
    results = []
    for connection in connections:
        other = storage.get_user(connection.other_party(user_id))
        results.append(ConnectionWithUser(
            connection=connection,
            user=UserSummary.model_validate(other) if other else None
        ))
    return results


@router.post("", response_model=Connection, status_code=201)
async def request_connection(body: ConnectionCreate, user: User = Depends(get_current_user),
                             storage: IStorage = Depends(get_storage)):
    if body.receiver_id == user.id:
        raise HTTPException(status_code=400, detail="You cannot connect with yourself")
    if storage.get_user(body.receiver_id) is None:
        raise HTTPException(status_code=404, detail="User not found")
    if storage.find_active_connection(user.id, body.receiver_id):
        raise HTTPException(status_code=400, detail="A connection with this user already exists")

    return storage.create_connection(user.id, body.receiver_id)


@router.patch("/{connection_id}", response_model=Connection)
async def respond_to_connection(connection_id: int, body: ConnectionStatusUpdate,
                                user: User = Depends(get_current_user),
                                storage: IStorage = Depends(get_storage)):
    """Accept or reject a pending request. Only the receiver may respond."""
    connection = get_connection_or_404(storage, connection_id)
    if connection.receiver_id != user.id:
        raise HTTPException(status_code=403, detail="Only the receiver can respond to this request")
    if connection.status != ConnectionStatus.pending:
        raise HTTPException(status_code=400, detail="Connection request has already been answered")

    return storage.update_connection_status(connection_id, body.status)


@router.get("", response_model=List[ConnectionWithUser])
async def list_connections(user: User = Depends(get_current_user), storage: IStorage = Depends(get_storage)):
    return with_other_user(storage, storage.list_connections(user.id), user.id)


@router.get("/pending", response_model=List[ConnectionWithUser])
async def pending_received(user: User = Depends(get_current_user), storage: IStorage = Depends(get_storage)):
    return with_other_user(storage, storage.list_pending_received(user.id), user.id)


@router.get("/sent-pending", response_model=List[ConnectionWithUser])
async def pending_sent(user: User = Depends(get_current_user), storage: IStorage = Depends(get_storage)):
    return with_other_user(storage, storage.list_pending_sent(user.id), user.id)


@router.delete("/{connection_id}", response_model=MessageResponse)
async def remove_connection(connection_id: int, user: User = Depends(get_current_user),
                            storage: IStorage = Depends(get_storage)):
    connection = get_connection_or_404(storage, connection_id)
    if user.id not in (connection.requester_id, connection.receiver_id):
        raise HTTPException(status_code=403, detail="Not your connection")

    storage.delete_connection(connection_id)
    return MessageResponse(message="Connection removed")
