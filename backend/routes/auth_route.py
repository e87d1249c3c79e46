import tomllib

from fastapi import APIRouter, Depends, Request
from pydantic import Field

from models.auth import User
from models.common import CamelModel
from models.views import SocialMedia, UserProfile
from routes.deps import current_user, get_current_user, get_user_directory
from services.errors import InvalidArgument
from services.users import UserDirectory
from settings import PROJECT_PATH

router = APIRouter()


def get_version() -> str:
    with open(PROJECT_PATH / "pyproject.toml", "rb") as f:
        pyproject = tomllib.load(f)
    return pyproject["project"]["version"]


def profile_of(user: User) -> UserProfile:
    return UserProfile(
        id=user.id,
        display_name=user.name,
        avatar_url=user.picture,
        username=user.username,
        join_date=user.join_date,
        social_medias=user.social_medias or [],
    )


@router.get("/")
async def index():
    return {"version": get_version(), "status": "ok"}


@router.get("/user/me")
async def get_current_user_info(
    user: User | None = Depends(get_current_user),
):
    if not user:
        return {"user": None}

    return {
        "user": profile_of(user).model_dump(by_alias=True, mode="json")
        | {"email": user.email, "isAdmin": user.is_admin}
    }


@router.post("/logout")
async def logout(request: Request):
    request.session.clear()
    return {"message": "Logged out successfully"}


class ProfileUpdate(CamelModel):
    name: str | None = Field(default=None, max_length=80)
    picture: str | None = Field(default=None, max_length=512)
    # Replaces the whole list when given
    social_medias: list[SocialMedia] | None = Field(default=None, max_length=20)


@router.put("/user/me")
async def update_profile(
    payload: ProfileUpdate,
    users: UserDirectory = Depends(get_user_directory),
    user: User = Depends(current_user),
):
    name = payload.name.strip() if payload.name is not None else None
    if name == "":
        raise InvalidArgument("Name cannot be empty.")

    social_medias = (
        [s.model_dump() for s in payload.social_medias]
        if payload.social_medias is not None
        else None
    )
    updated = users.update_profile(
        user.id, name=name, picture=payload.picture, social_medias=social_medias
    )
    return {"user": profile_of(updated).model_dump(by_alias=True, mode="json")}
