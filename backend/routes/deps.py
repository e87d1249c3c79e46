from fastapi import Depends, Request, HTTPException

from models.auth import User
from services.relationships import RelationshipService
from services.users import UserDirectory


def get_user_directory(request: Request) -> UserDirectory:
    return request.app.state.users


def get_relationship_service(request: Request) -> RelationshipService:
    return request.app.state.relationships


def get_current_user_id(request: Request) -> str | None:
    return request.session.get("user_id")


def get_current_user(
    request: Request, users: UserDirectory = Depends(get_user_directory)
) -> User | None:
    user_id = get_current_user_id(request)
    if not user_id:
        return None
    return users.get(user_id)


def current_user(user: User = Depends(get_current_user)) -> User:
    if user is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user
