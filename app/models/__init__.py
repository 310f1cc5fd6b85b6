from app.models.profile import (
    Profile,
    ProfileCreate,
    ProfileRead,
    ProfileType,
    ProfileUpdate,
    SubscriptionPlan,
    SubscriptionStatus,
)
from app.models.public_profile import PublicProfile, public_profiles_view

__all__ = [
    "Profile",
    "ProfileCreate",
    "ProfileRead",
    "ProfileType",
    "ProfileUpdate",
    "PublicProfile",
    "SubscriptionPlan",
    "SubscriptionStatus",
    "public_profiles_view",
]
