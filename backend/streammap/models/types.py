"""Column types for geometry values"""

import shapely
from geoalchemy2 import Geometry
from geoalchemy2.elements import WKBElement
from geoalchemy2.shape import from_shape, to_shape
from sqlalchemy import Text
from sqlalchemy.types import TypeDecorator

from streammap.services.coordinate_service import WGS84_SRID


class SpatialGeometry(TypeDecorator):
    """
    Geometry column exchanging SRID-tagged shapely geometries.

    On PostgreSQL the column is a PostGIS ``geometry(<type>, <srid>)``
    handled by geoalchemy2. Other dialects (SQLite in tests) keep the same
    EWKB as hex text, so values are converted by geoalchemy2 either way and
    no spatial extension is needed outside PostGIS.
    """

    impl = Text
    cache_ok = True

    def __init__(self, geometry_type: str = "GEOMETRY", srid: int = WGS84_SRID):
        super().__init__()
        self.geometry_type = geometry_type
        self.srid = srid

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(
                Geometry(geometry_type=self.geometry_type, srid=self.srid, spatial_index=False)
            )
        return dialect.type_descriptor(Text())

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        element = from_shape(value, srid=shapely.get_srid(value) or self.srid, extended=True)
        if dialect.name == "postgresql":
            return element
        return element.desc

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if not isinstance(value, WKBElement):
            value = WKBElement(value, extended=True)
        srid = value.srid if value.srid > 0 else self.srid
        return shapely.set_srid(to_shape(value), srid)
