from fastapi import APIRouter, Depends, Query, Response
from pydantic import Field

from models.auth import User
from models.common import CamelModel
from models.relationship import RelationshipStatus
from models.views import CounterpartOut, PendingOut, RelationshipOut
from routes.deps import current_user, get_relationship_service
from services.relationships import RelationshipService

router = APIRouter(prefix="/relationships")


class RelationshipCreate(CamelModel):
    recipient: str = Field(min_length=1, max_length=64)


class RelationshipUpdate(CamelModel):
    status: RelationshipStatus


@router.post("", response_model=RelationshipOut, status_code=201)
async def create_relationship(
    payload: RelationshipCreate,
    response: Response,
    service: RelationshipService = Depends(get_relationship_service),
    user: User = Depends(current_user),
):
    relationship, created = service.create(user, payload.recipient)
    if not created:
        response.status_code = 200
    return service.present(relationship)


@router.get("/friends", response_model=list[CounterpartOut])
async def list_friends(
    user_id: str | None = Query(default=None, alias="userId"),
    service: RelationshipService = Depends(get_relationship_service),
    user: User = Depends(current_user),
):
    return service.list_friends(user, user_id)


@router.get("/pending", response_model=PendingOut)
async def list_pending(
    service: RelationshipService = Depends(get_relationship_service),
    user: User = Depends(current_user),
):
    return service.list_pending(user)


@router.get("/blocked", response_model=list[CounterpartOut])
async def list_blocked(
    service: RelationshipService = Depends(get_relationship_service),
    user: User = Depends(current_user),
):
    return service.list_blocked(user)


@router.get("/status/{user_id}")
async def relationship_status(
    user_id: str,
    service: RelationshipService = Depends(get_relationship_service),
    user: User = Depends(current_user),
):
    """Return the relationship status between the current user and the target user.
    Possible statuses: self, none, friends, pending_outgoing, pending_incoming,
    rejected, blocked
    """
    return {"status": service.status_with(user, user_id)}


@router.delete("/with/{user_id}")
async def unfriend(
    user_id: str,
    service: RelationshipService = Depends(get_relationship_service),
    user: User = Depends(current_user),
):
    service.unfriend(user, user_id)
    return {"message": "Relationship deleted"}


@router.get("/{relationship_id}", response_model=RelationshipOut)
async def get_relationship(
    relationship_id: str,
    service: RelationshipService = Depends(get_relationship_service),
    user: User = Depends(current_user),
):
    return service.present(service.get(user, relationship_id))


@router.put("/{relationship_id}", response_model=RelationshipOut)
async def update_relationship(
    relationship_id: str,
    payload: RelationshipUpdate,
    service: RelationshipService = Depends(get_relationship_service),
    user: User = Depends(current_user),
):
    relationship = service.update_status(user, relationship_id, payload.status)
    return service.present(relationship)


@router.delete("/{relationship_id}")
async def delete_relationship(
    relationship_id: str,
    service: RelationshipService = Depends(get_relationship_service),
    user: User = Depends(current_user),
):
    service.delete(user, relationship_id)
    return {"message": "Relationship deleted"}
