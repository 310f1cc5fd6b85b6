from app.domain.profile_operations import profile_ops
from app.domain.public_profile_operations import public_profile_ops
from app.domain.subscription_operations import subscription_ops

__all__ = [
    "profile_ops",
    "public_profile_ops",
    "subscription_ops",
]
