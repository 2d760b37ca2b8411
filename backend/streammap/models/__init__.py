"""Database models package"""

from streammap.models.base import BaseModel
from streammap.models.organization import Organization
from streammap.models.user import User
from streammap.models.state import State
from streammap.models.project import Project
from streammap.models.affiliation import Affiliation
from streammap.models.photo import Photo

# Export all models
__all__ = [
    "BaseModel",
    "Organization",
    "User",
    "State",
    "Project",
    "Affiliation",
    "Photo",
]
