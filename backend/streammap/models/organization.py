"""Organization model"""

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from streammap.models.base import BaseModel


class Organization(BaseModel):
    """
    Organization model representing a sponsor or partner of restoration work.
    Linked to projects through affiliations; never deleted along with a project.
    """

    __tablename__ = "organizations"

    name = Column(String(255), unique=True, nullable=False)

    # Relationships
    affiliations = relationship("Affiliation", back_populates="organization")

    def __repr__(self):
        return f"<Organization(id={self.id}, name={self.name})>"
