"""Project schemas"""

from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field
from datetime import date, datetime
from uuid import UUID

from streammap.schemas.organization import OrganizationResponse, StateResponse
from streammap.schemas.photo import PhotoAttachment, PhotoResponse

# Raw JSON scalars; attribute rules are applied by ProjectAttributes so that
# every violation is reported in one response
RawValue = Optional[Union[str, int, float]]


class ProjectCreate(BaseModel):
    """Project creation schema"""
    name: RawValue = Field(None, description="Project name, at most 255 characters")
    stream_name: RawValue = Field(None, description="Stream the work was done on")
    watershed: RawValue = Field(None, description="Watershed name")
    implementation_date: RawValue = Field(None, description="Implementation date, yyyy-mm-dd")
    primary_contact: RawValue = Field(None, description="Primary contact")
    narrative: RawValue = Field(None, description="Project narrative")
    structure_description: RawValue = Field(None, description="Description of installed structures")
    url: RawValue = Field(None, description="Project web page, at most 500 characters")
    length: RawValue = Field(None, description="Treated stream length in meters")
    number_of_structures: RawValue = Field(None, description="Number of installed structures")
    latitude: RawValue = Field(None, description="Decimal latitude, between -90 and 90")
    longitude: RawValue = Field(None, description="Decimal longitude, between -180 and 180")
    affiliation_legacy: RawValue = Field(None, description="Free-text affiliation")
    organization_ids: list[str] = Field(default_factory=list, description="Affiliated organization IDs")
    photos: list[PhotoAttachment] = Field(default_factory=list, description="Photo attachments")


class ProjectUpdate(BaseModel):
    """Project update schema - all fields optional"""
    name: RawValue = Field(None, description="Project name, at most 255 characters")
    stream_name: RawValue = Field(None, description="Stream the work was done on")
    watershed: RawValue = Field(None, description="Watershed name")
    implementation_date: RawValue = Field(None, description="Implementation date, yyyy-mm-dd")
    primary_contact: RawValue = Field(None, description="Primary contact")
    narrative: RawValue = Field(None, description="Project narrative")
    structure_description: RawValue = Field(None, description="Description of installed structures")
    url: RawValue = Field(None, description="Project web page, at most 500 characters")
    length: RawValue = Field(None, description="Treated stream length in meters")
    number_of_structures: RawValue = Field(None, description="Number of installed structures")
    latitude: RawValue = Field(None, description="Decimal latitude, between -90 and 90")
    longitude: RawValue = Field(None, description="Decimal longitude, between -180 and 180")
    affiliation_legacy: RawValue = Field(None, description="Free-text affiliation")
    organization_ids: Optional[list[str]] = Field(None, description="Replacement organization ID set")
    photos: list[PhotoAttachment] = Field(default_factory=list, description="Photos to add")



class ProjectResponse(BaseModel):
    """Project response schema"""
    id: UUID
    name: str
    title: str
    stream_name: str
    watershed: str
    implementation_date: date
    primary_contact: str
    url: str
    length: int
    number_of_structures: int
    latitude: Optional[float] = Field(None, validation_alias="point_latitude")
    longitude: Optional[float] = Field(None, validation_alias="point_longitude")
    state_id: Optional[UUID] = None
    author_id: UUID
    affiliations_count: int = 0
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProjectDetailResponse(ProjectResponse):
    """Detailed project response with narrative, region, and relations"""
    narrative: str
    structure_description: str
    affiliation_legacy: Optional[str] = None
    byline: str
    state: Optional[StateResponse] = None
    organizations: list[OrganizationResponse] = Field(default_factory=list)
    photos: list[PhotoResponse] = Field(default_factory=list)


class ProjectListResponse(BaseModel):
    """List of projects response"""
    projects: list[ProjectResponse]
    total: int = Field(..., description="Total number of matching projects")


class ProjectMarker(BaseModel):
    """Flat project summary for plotting a map marker"""
    id: UUID
    project_name: str
    stream_name: str
    watershed: str
    latitude: float
    longitude: float
    detail_path: str

    @classmethod
    def from_project(cls, project) -> "ProjectMarker":
        return cls(
            id=project.id,
            project_name=project.name,
            stream_name=project.stream_name,
            watershed=project.watershed,
            latitude=project.point_latitude,
            longitude=project.point_longitude,
            detail_path=f"/projects/{project.id}",
        )


class MapConfig(BaseModel):
    """Initial map view and tile source for the browser map"""
    center_latitude: float
    center_longitude: float
    zoom: int
    max_zoom: int
    tile_url: str
    attribution: str


class ProjectMapResponse(BaseModel):
    """Map markers response"""
    projects: list[ProjectMarker]
    map: MapConfig


class ProjectStatsResponse(BaseModel):
    """Aggregate statistics over all or filtered projects"""
    project_count: int = Field(..., description="Number of projects")
    structure_sum: int = Field(..., description="Total number of structures")
    project_total_length_km: float = Field(..., description="Total treated length in kilometers")
