import uuid
from sqlmodel import select, Session

from klub.core.exceptions import ValidationError
from klub.models.profiles import Profile
from klub.schemas.profiles import ProfileCreate, ProfileUpdate


def list_profiles(db: Session) -> list[Profile]:
    """Get all user profiles."""
    return db.exec(select(Profile).order_by(Profile.created_at)).all()


def get_profile_by_id(db: Session, profile_id: uuid.UUID) -> Profile | None:
    """Get a profile by its ID."""
    return db.get(Profile, profile_id)


def get_profile_by_email(db: Session, email: str) -> Profile | None:
    """Get a profile by email."""
    return db.exec(select(Profile).where(Profile.email == email)).first()


def create_profile(
    db: Session,
    profile_data: ProfileCreate,
    profile_id: uuid.UUID | None = None
) -> Profile:
    """Create a profile; profile_id lets callers reuse the identity-provider id."""
    if get_profile_by_email(db, profile_data.email):
        raise ValidationError("Email already registered", details=profile_data.email)

    profile = Profile(**profile_data.model_dump())
    if profile_id is not None:
        profile.id = profile_id
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


def update_profile(
    db: Session,
    profile: Profile,
    profile_data: ProfileUpdate
) -> Profile:
    """Update profile fields present in profile_data."""
    updates = profile_data.model_dump(exclude_unset=True)
    if "email" in updates:
        if updates["email"] is None:
            raise ValidationError("Email is required")
        existing = get_profile_by_email(db, updates["email"])
        if existing and existing.id != profile.id:
            raise ValidationError("Email already registered", details=updates["email"])

    for field, value in updates.items():
        setattr(profile, field, value)

    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


def delete_profile(db: Session, profile: Profile) -> None:
    """Delete a profile."""
    db.delete(profile)
    db.commit()
