"""Configuration package."""

from app.config.plans import PLANS, PlanConfig, get_plan
from app.config.settings import Settings, settings
from app.config.specialties import SPECIALTIES, Specialty, get_specialty, is_known_specialty

__all__ = [
    "PlanConfig",
    "PLANS",
    "get_plan",
    "Settings",
    "settings",
    "Specialty",
    "SPECIALTIES",
    "get_specialty",
    "is_known_specialty",
]
