"""API schemas package"""

from .photo import PhotoAttachment, PhotoResponse
from .organization import (
    OrganizationResponse,
    OrganizationListResponse,
    StateResponse,
    StateListResponse,
)
from .project import (
    ProjectCreate,
    ProjectUpdate,
    ProjectResponse,
    ProjectDetailResponse,
    ProjectListResponse,
    ProjectMarker,
    ProjectMapResponse,
    ProjectStatsResponse,
    MapConfig,
)

__all__ = [
    "PhotoAttachment",
    "PhotoResponse",
    "OrganizationResponse",
    "OrganizationListResponse",
    "StateResponse",
    "StateListResponse",
    "ProjectCreate",
    "ProjectUpdate",
    "ProjectResponse",
    "ProjectDetailResponse",
    "ProjectListResponse",
    "ProjectMarker",
    "ProjectMapResponse",
    "ProjectStatsResponse",
    "MapConfig",
]
