from cardulary.models.base import Base, BaseModel
from .organizer import Organizer
from .rate_limit import RateLimitCounter

__all__ = [
    "Base",
    "BaseModel",
    "Organizer",
    "RateLimitCounter",
]
