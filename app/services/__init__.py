# Services package

from app.services.signup_service import SignupRequest, SignupResult, SignupService, signup_service
from app.services.supabase import SupabaseAuthError

__all__ = [
    # Signup
    "SignupRequest",
    "SignupResult",
    "SignupService",
    "signup_service",
    # Supabase Auth
    "SupabaseAuthError",
]
