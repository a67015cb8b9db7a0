import uuid
from fastapi import APIRouter, Response

from klub.api.deps import CurrentAuth, SessionDep
from klub.core.exceptions import NotFound
from klub.crud import profiles as crud_profiles
from klub.schemas.profiles import MeResponse, ProfileCreate, ProfileResponse, ProfileUpdate

router = APIRouter(prefix="/user", tags=["users"])


def _get_profile_or_404(db, profile_id: uuid.UUID):
    profile = crud_profiles.get_profile_by_id(db, profile_id)
    if profile is None:
        raise NotFound("User not found")
    return profile


@router.get("/me", response_model=MeResponse)
def get_me(auth: CurrentAuth, db: SessionDep):
    """Identity of the caller plus their stored profile, if any."""
    profile = crud_profiles.get_profile_by_id(db, auth.user_id)
    return MeResponse(
        user_id=auth.user_id,
        email=auth.email,
        role=auth.role,
        profile=ProfileResponse.model_validate(profile) if profile else None,
    )


@router.get("", response_model=list[ProfileResponse])
def list_users(auth: CurrentAuth, db: SessionDep):
    """List all user profiles."""
    return crud_profiles.list_profiles(db)


@router.get("/{user_id}", response_model=ProfileResponse)
def get_user(user_id: uuid.UUID, auth: CurrentAuth, db: SessionDep):
    """Get a user profile."""
    return _get_profile_or_404(db, user_id)


@router.post("", response_model=ProfileResponse, status_code=201)
def create_user(profile_data: ProfileCreate, auth: CurrentAuth, db: SessionDep):
    """Create a profile. Creating your own profile reuses your identity-provider id."""
    profile_id = None
    if auth.email and auth.email == profile_data.email:
        if crud_profiles.get_profile_by_id(db, auth.user_id) is None:
            profile_id = auth.user_id
    return crud_profiles.create_profile(db, profile_data, profile_id=profile_id)


@router.put("/{user_id}", response_model=ProfileResponse)
def update_user(user_id: uuid.UUID, profile_data: ProfileUpdate, auth: CurrentAuth, db: SessionDep):
    """Update a user profile."""
    profile = _get_profile_or_404(db, user_id)
    return crud_profiles.update_profile(db, profile, profile_data)


@router.delete("/{user_id}", status_code=204)
def delete_user(user_id: uuid.UUID, auth: CurrentAuth, db: SessionDep):
    """Delete a user profile."""
    profile = _get_profile_or_404(db, user_id)
    crud_profiles.delete_profile(db, profile)
    return Response(status_code=204)
