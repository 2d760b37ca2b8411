"""Project model"""

from datetime import date
from typing import Optional

from sqlalchemy import Column, String, Text, Integer, Date, ForeignKey, Uuid, CheckConstraint
from sqlalchemy.orm import relationship
from streammap.models.base import BaseModel
from streammap.models.types import SpatialGeometry


def format_title(stream_name: Optional[str]) -> str:
    """Display title for a project on the given stream"""
    return f"Project on {stream_name}"


def format_long_date(value: date) -> str:
    """Long date form, e.g. 'October 5, 2017'"""
    return f"{value:%B} {value.day}, {value.year}"


def format_byline(implementation_date: date, affiliation: Optional[str] = None) -> str:
    """Sentence describing when, and with whom, a project was implemented"""
    if affiliation:
        return f"Implemented on {format_long_date(implementation_date)} in affiliation with {affiliation}"
    return f"Implemented on {format_long_date(implementation_date)}"


class Project(BaseModel):
    """
    Project model representing a stream restoration construction project.

    ``latitude`` and ``longitude`` are raw inputs for the next save and are
    not persisted. The canonical point ``lonlat`` and the containing region
    ``state_id`` are derived from them every time the project is saved.
    """

    __tablename__ = "projects"

    author_id = Column(
        Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True
    )
    state_id = Column(
        Uuid(as_uuid=True), ForeignKey("states.id"), nullable=True, index=True
    )

    name = Column(String(255), nullable=False, index=True)
    stream_name = Column(String(255), nullable=False, index=True)
    watershed = Column(String(255), nullable=False, index=True)
    implementation_date = Column(Date, nullable=False)
    primary_contact = Column(String(255), nullable=False)
    narrative = Column(Text, nullable=False)
    structure_description = Column(Text, nullable=False)
    url = Column(String(500), nullable=False)
    length = Column(Integer, nullable=False)  # meters
    number_of_structures = Column(Integer, nullable=False)
    affiliation_legacy = Column(String(255), nullable=True)
    affiliations_count = Column(Integer, nullable=False, default=0, server_default="0")
    lonlat = Column(SpatialGeometry("POINT"), nullable=False)

    # Raw coordinate input, consumed by the save pipeline
    latitude = None
    longitude = None

    # Relationships
    author = relationship("User", back_populates="projects")
    state = relationship("State", back_populates="projects")
    affiliations = relationship("Affiliation", back_populates="project", passive_deletes=True)
    organizations = relationship(
        "Organization",
        secondary="affiliations",
        viewonly=True,
        order_by="Organization.name",
    )
    photos = relationship(
        "Photo", back_populates="project", order_by="Photo.created_at", passive_deletes=True
    )

    __table_args__ = (
        CheckConstraint("length > 0", name="check_project_length_positive"),
        CheckConstraint("number_of_structures > 0", name="check_project_structures_positive"),
    )

    @property
    def title(self) -> str:
        return format_title(self.stream_name)

    @property
    def affiliation(self) -> Optional[str]:
        """Free-text affiliation label, if any"""
        return self.affiliation_legacy or None

    @property
    def byline(self) -> str:
        return format_byline(self.implementation_date, self.affiliation)

    @property
    def point_latitude(self) -> Optional[float]:
        """Latitude of the stored canonical point"""
        return self.lonlat.y if self.lonlat is not None else None

    @property
    def point_longitude(self) -> Optional[float]:
        """Longitude of the stored canonical point"""
        return self.lonlat.x if self.lonlat is not None else None

    def __repr__(self):
        return f"<Project(id={self.id}, name={self.name}, stream_name={self.stream_name})>"
