from app.api.v1 import profiles, specialties, subscriptions

__all__ = [
    "profiles",
    "specialties",
    "subscriptions",
]
