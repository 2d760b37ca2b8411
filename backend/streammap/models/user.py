"""User model"""

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from streammap.models.base import BaseModel


class User(BaseModel):
    """
    User model representing a project author.
    Identities are issued elsewhere; this row only anchors authorship.
    """

    __tablename__ = "users"

    email = Column(String(255), unique=True, nullable=False, index=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)

    # Relationships
    projects = relationship("Project", back_populates="author")

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email})>"
