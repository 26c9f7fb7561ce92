# Models package (re-export feature modules for stable imports)
from .users.user import User
from .users.preferences import UserPreferences
from .media.image import Image
from .history.analysis import UserAnalysis

__all__ = [
    "User",
    "UserPreferences",
    "Image",
    "UserAnalysis",
]
