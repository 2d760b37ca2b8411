"""Region resolution by point-in-polygon containment"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional
from uuid import UUID, uuid4

import shapely
from shapely.errors import ShapelyError
from shapely.geometry import Point, Polygon, shape
from shapely.geometry.base import BaseGeometry
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from streammap.models.state import State
from streammap.monitoring.metrics import record_region_resolution
from streammap.services.coordinate_service import WGS84_SRID

logger = logging.getLogger(__name__)


class RegionServiceError(Exception):
    """Base exception for region service errors"""
    pass


class RegionResolutionError(RegionServiceError):
    """Point cannot be evaluated against the catalog"""
    pass


class RegionCatalogError(RegionServiceError):
    """Region geometry is missing, malformed, or unsupported"""
    pass


@dataclass(frozen=True)
class Region:
    """A named polygon in the region catalog"""
    id: UUID
    name: str
    polygon: Polygon


class RegionCatalog:
    """
    Fixed, ordered set of region polygons.

    Regions are expected not to overlap. When they do, resolution takes the
    first match in catalog order.
    """

    def __init__(self, regions: Iterable[Region] = ()):
        self._regions: List[Region] = list(regions)

    def __iter__(self) -> Iterator[Region]:
        return iter(self._regions)

    def __len__(self) -> int:
        return len(self._regions)

    @classmethod
    def from_geojson(cls, feature_collection: Dict[str, Any], name_property: str = "name") -> "RegionCatalog":
        """
        Build a catalog from a GeoJSON FeatureCollection of Polygons.

        Args:
            feature_collection: Parsed GeoJSON document
            name_property: Feature property holding the region name

        Returns:
            RegionCatalog with one region per feature

        Raises:
            RegionCatalogError: If the document or any geometry is unsupported
        """
        if feature_collection.get("type") != "FeatureCollection":
            raise RegionCatalogError("Region catalog must be a GeoJSON FeatureCollection")

        regions = []
        for index, feature in enumerate(feature_collection.get("features") or []):
            properties = feature.get("properties") or {}
            name = properties.get(name_property) or f"region-{index}"
            polygon = parse_polygon(feature.get("geometry"), name)
            region_id = properties.get("id")
            regions.append(
                Region(
                    id=UUID(str(region_id)) if region_id else uuid4(),
                    name=name,
                    polygon=polygon,
                )
            )
        return cls(regions)


def parse_polygon(geometry: Any, name: str = "region") -> Polygon:
    """
    Parse a shapely geometry, GeoJSON mapping, or WKT string into a valid
    Polygon.

    Raises:
        RegionCatalogError: If the geometry is malformed or not a Polygon
    """
    if not geometry:
        raise RegionCatalogError(f"Region {name} has no geometry")

    try:
        if isinstance(geometry, BaseGeometry):
            polygon = geometry
        elif isinstance(geometry, str):
            polygon = shapely.from_wkt(geometry)
        else:
            polygon = shape(geometry)
    except (ShapelyError, ValueError, TypeError, KeyError, AttributeError) as e:
        raise RegionCatalogError(f"Region {name} has malformed geometry: {e}") from e

    if not isinstance(polygon, Polygon):
        raise RegionCatalogError(
            f"Region {name} must be a Polygon, got {polygon.geom_type}"
        )
    if polygon.is_empty:
        raise RegionCatalogError(f"Region {name} has an empty polygon")
    return polygon


def resolve_region(point: Point, region_catalog: Iterable[Region]) -> Optional[UUID]:
    """
    Find the region whose polygon strictly contains a point.

    Points on a region boundary are not contained by it.

    Args:
        point: Canonical point in SRID 4326
        region_catalog: Regions to test, in priority order

    Returns:
        Identifier of the first containing region, or None

    Raises:
        RegionResolutionError: If the point is missing, malformed, or in
            another spatial reference system
    """
    if point is None or not isinstance(point, Point) or point.is_empty:
        raise RegionResolutionError(f"Cannot resolve region for malformed point {point!r}")

    srid = shapely.get_srid(point)
    if srid not in (0, WGS84_SRID):
        raise RegionResolutionError(f"Point has SRID {srid}, expected {WGS84_SRID}")

    matches = [region for region in region_catalog if region.polygon.contains(point)]

    if not matches:
        return None

    if len(matches) > 1:
        logger.warning(
            f"Point {point.wkt} lies in {len(matches)} regions "
            f"({', '.join(region.name for region in matches)}); using {matches[0].name}"
        )

    return matches[0].id


class RegionService:
    """
    Resolves project points against the State catalog stored in the database.
    """

    def __init__(self, db: AsyncSession):
        """Initialize with database session"""
        self.db = db

    async def load_catalog(self) -> RegionCatalog:
        """
        Load all State rows into an in-memory catalog, ordered by name.

        Rows with empty or non-Polygon geometry are skipped and logged.
        """
        result = await self.db.execute(select(State).order_by(State.name))

        regions = []
        for state in result.scalars().all():
            try:
                polygon = parse_polygon(state.geom, state.name)
            except RegionCatalogError as e:
                logger.error(f"Skipping state {state.id}: {e}")
                continue
            regions.append(Region(id=state.id, name=state.name, polygon=polygon))

        return RegionCatalog(regions)

    async def resolve(self, point: Point) -> Optional[UUID]:
        """
        Resolve a point to a State id.

        Resolution failures are logged and reported as no region so that a
        project save is never blocked by the region catalog. Database errors
        raised while loading the catalog are propagated.

        Args:
            point: Canonical point in SRID 4326

        Returns:
            State id, or None if no state contains the point
        """
        catalog = await self.load_catalog()

        try:
            state_id = resolve_region(point, catalog)
        except RegionResolutionError as e:
            logger.warning(f"Region resolution failed: {e}")
            record_region_resolution("failed")
            return None

        if state_id is None:
            logger.info(f"No state contains point {point.wkt}")
            record_region_resolution("unmatched")
        else:
            record_region_resolution("matched")

        return state_id
