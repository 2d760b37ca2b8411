"""Photo model"""

from sqlalchemy import Column, String, Integer, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from streammap.models.base import BaseModel


class Photo(BaseModel):
    """
    Photo attachment metadata for a project.
    The bytes live in external storage under storage_key.
    """

    __tablename__ = "photos"

    project_id = Column(
        Uuid(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    filename = Column(String(255), nullable=False)
    content_type = Column(String(50), nullable=False)
    byte_size = Column(Integer, nullable=False)
    storage_key = Column(String(500), nullable=True, unique=True)

    # Relationships
    project = relationship("Project", back_populates="photos")

    def __repr__(self):
        return f"<Photo(id={self.id}, filename={self.filename})>"
