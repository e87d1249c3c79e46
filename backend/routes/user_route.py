from fastapi import APIRouter, Depends

from models.auth import User
from routes.auth_route import profile_of
from routes.deps import current_user, get_relationship_service
from services.relationships import RelationshipService
from utils import time_it

router = APIRouter(prefix="/users")


@router.get("/search")
@time_it
async def search_users(
    q: str | None = None,
    limit: int | None = None,
    service: RelationshipService = Depends(get_relationship_service),
    user: User = Depends(current_user),
):
    """Find people by name, email or username.

    The caller and anyone already related to them (friends, pending, rejected
    or blocked) are never returned.
    """
    users = service.search_users(user, q, limit)
    return {
        "users": [profile_of(u).model_dump(by_alias=True, mode="json") for u in users]
    }


@router.get("/{user_id}")
async def get_profile(
    user_id: str,
    service: RelationshipService = Depends(get_relationship_service),
    user: User = Depends(current_user),
):
    profile = service.get_profile(user, user_id)
    return {"user": profile_of(profile).model_dump(by_alias=True, mode="json")}
