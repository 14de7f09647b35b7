# storefront/repos/profile_repo.py
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy.orm import Session

from storefront.data.models.user_profile import UserProfileModel


def profile_dict(p: UserProfileModel) -> Dict[str, Any]:
    return {
        "id": p.id,
        "phone_number": p.phone_number,
        "full_name": p.full_name,
        "email": p.email,
        "default_address": p.default_address,
        "is_admin": p.is_admin,
    }


class ProfileRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_profile(self, user_id: str) -> UserProfileModel | None:
        return self.db.get(UserProfileModel, user_id)

    def create_profile(self, profile: UserProfileModel) -> UserProfileModel:
        self.db.add(profile)
        self.db.commit()
        self.db.refresh(profile)
        return profile

    def update_profile(self, user_id: str, data: Dict[str, Any]) -> UserProfileModel | None:
        profile = self.get_profile(user_id)
        if profile:
            for field, value in data.items():
                setattr(profile, field, value)
            profile.updated_at = datetime.now(timezone.utc)
            self.db.commit()
            self.db.refresh(profile)
        return profile

    def rollback(self):
        self.db.rollback()
