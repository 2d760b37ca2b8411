"""State model"""

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from streammap.models.base import BaseModel
from streammap.models.types import SpatialGeometry


class State(BaseModel):
    """
    Administrative region used for containment lookup.
    The boundary is a Polygon in SRID 4326, longitude/latitude axis order.
    Rows are loaded offline and only read by the application.
    """

    __tablename__ = "states"

    name = Column(String(100), unique=True, nullable=False, index=True)
    geom = Column(SpatialGeometry("POLYGON"), nullable=False)

    # Relationships
    projects = relationship("Project", back_populates="state")

    def __repr__(self):
        return f"<State(id={self.id}, name={self.name})>"
