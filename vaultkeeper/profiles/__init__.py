"""
Vaultkeeper profiles module.
"""

from .models import Profile, UpdateProfileRequest
from .profiles import ProfileManager

__all__ = [
    "ProfileManager",
    "Profile",
    "UpdateProfileRequest",
]
