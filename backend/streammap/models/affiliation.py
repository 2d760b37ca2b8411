"""Affiliation model"""

from sqlalchemy import Column, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from streammap.models.base import BaseModel


class Affiliation(BaseModel):
    """
    Join record associating a project with a sponsoring organization.
    """

    __tablename__ = "affiliations"

    project_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    organization_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("organizations.id"),
        nullable=False,
        index=True,
    )

    # Relationships
    project = relationship("Project", back_populates="affiliations")
    organization = relationship("Organization", back_populates="affiliations", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("project_id", "organization_id", name="uq_affiliation_project_organization"),
    )

    def __repr__(self):
        return f"<Affiliation(project_id={self.project_id}, organization_id={self.organization_id})>"
