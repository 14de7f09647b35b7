# storefront/data/models/user_profile.py
from datetime import datetime, timezone

from sqlalchemy import Column, String, Boolean, DateTime, JSON

from storefront.data.database import Base


class UserProfileModel(Base):
    __tablename__ = "user_profiles"

    # same id as the auth provider's user
    id = Column(String, primary_key=True)
    phone_number = Column(String, nullable=False)
    full_name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    default_address = Column(JSON, nullable=True)
    is_admin = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
