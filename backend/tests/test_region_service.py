"""Tests for region resolution"""

import logging
import pytest
import shapely
from uuid import uuid4
from shapely.geometry import Point, Polygon
from sqlalchemy.ext.asyncio import AsyncSession

from streammap.models import State
from streammap.services.coordinate_service import GeometryFactory
from streammap.services.region_service import (
    Region,
    RegionCatalog,
    RegionCatalogError,
    RegionResolutionError,
    RegionService,
    parse_polygon,
    resolve_region,
)


def square(min_x, min_y, max_x, max_y):
    return parse_polygon(
        f"POLYGON (({min_x} {min_y}, {max_x} {min_y}, {max_x} {max_y}, {min_x} {max_y}, {min_x} {min_y}))"
    )


@pytest.fixture
def factory():
    return GeometryFactory()


@pytest.fixture
def catalog():
    """Two adjacent regions sharing the lon -120 edge"""
    return RegionCatalog([
        Region(id=uuid4(), name="West", polygon=square(-122, 43, -120, 45)),
        Region(id=uuid4(), name="East", polygon=square(-120, 43, -118, 45)),
    ])


class TestResolveRegion:
    """Test point-in-polygon lookup"""

    def test_point_inside_region(self, catalog, factory):
        """Test a point inside a region resolves to it"""
        west, _ = list(catalog)

        assert resolve_region(factory.point(-121, 44), catalog) == west.id

    def test_point_outside_all_regions(self, catalog, factory):
        """Test a point outside every region resolves to None"""
        assert resolve_region(factory.point(-100, 10), catalog) is None

    def test_boundary_point_is_outside(self, factory):
        """Test a point on an edge is not contained"""
        catalog = RegionCatalog([Region(id=uuid4(), name="West", polygon=square(-122, 43, -120, 45))])

        assert resolve_region(factory.point(-120, 44), catalog) is None
        assert resolve_region(factory.point(-122, 43), catalog) is None

    def test_empty_catalog(self, factory):
        """Test an empty catalog resolves to None"""
        assert resolve_region(factory.point(-121, 44), RegionCatalog()) is None

    def test_overlap_uses_first_region_and_warns(self, factory, caplog):
        """Test overlapping regions resolve to the first in catalog order"""
        first = Region(id=uuid4(), name="First", polygon=square(-122, 43, -120, 45))
        second = Region(id=uuid4(), name="Second", polygon=square(-121.5, 43.5, -119, 46))
        catalog = RegionCatalog([first, second])

        with caplog.at_level(logging.WARNING, logger="streammap.services.region_service"):
            region_id = resolve_region(factory.point(-121, 44), catalog)

        assert region_id == first.id
        assert "lies in 2 regions" in caplog.text

    def test_untagged_point_is_accepted(self, catalog):
        """Test a point without SRID is treated as WGS84"""
        west, _ = list(catalog)

        assert resolve_region(Point(-121, 44), catalog) == west.id

    @pytest.mark.parametrize("point", [None, Point(), "POINT (-121 44)"])
    def test_malformed_point(self, catalog, point):
        """Test malformed points raise"""
        with pytest.raises(RegionResolutionError):
            resolve_region(point, catalog)

    def test_other_srid_rejected(self, catalog):
        """Test a point in another reference system raises"""
        point = shapely.set_srid(Point(-121, 44), 3857)

        with pytest.raises(RegionResolutionError):
            resolve_region(point, catalog)


class TestParsePolygon:
    """Test region geometry parsing"""

    def test_wkt_polygon(self):
        """Test WKT is parsed"""
        polygon = parse_polygon("POLYGON ((0 0, 1 0, 1 1, 0 1, 0 0))")

        assert polygon.geom_type == "Polygon"

    def test_geojson_polygon(self):
        """Test a GeoJSON mapping is parsed"""
        polygon = parse_polygon({
            "type": "Polygon",
            "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]]],
        })

        assert polygon.contains(Point(0.5, 0.5))

    @pytest.mark.parametrize("geometry", [
        None,
        "",
        "not wkt",
        "POINT (1 2)",
        "MULTIPOLYGON (((0 0, 1 0, 1 1, 0 0)))",
        "POLYGON EMPTY",
        {"type": "LineString", "coordinates": [[0, 0], [1, 1]]},
    ])
    def test_unsupported_geometry(self, geometry):
        """Test malformed or non-Polygon geometry raises"""
        with pytest.raises(RegionCatalogError):
            parse_polygon(geometry, "Broken")


class TestRegionCatalogFromGeoJSON:
    """Test building a catalog from GeoJSON"""

    def test_feature_collection(self):
        """Test each Polygon feature becomes a region in order"""
        region_id = uuid4()
        catalog = RegionCatalog.from_geojson({
            "type": "FeatureCollection",
            "features": [
                {
                    "type": "Feature",
                    "properties": {"name": "Oregon", "id": str(region_id)},
                    "geometry": {
                        "type": "Polygon",
                        "coordinates": [[[-122, 43], [-120, 43], [-120, 45], [-122, 45], [-122, 43]]],
                    },
                },
                {
                    "type": "Feature",
                    "properties": {"NAME": "Idaho"},
                    "geometry": {
                        "type": "Polygon",
                        "coordinates": [[[-117, 42], [-111, 42], [-111, 49], [-117, 49], [-117, 42]]],
                    },
                },
            ],
        })

        regions = list(catalog)
        assert len(catalog) == 2
        assert regions[0].name == "Oregon"
        assert regions[0].id == region_id
        assert regions[1].name == "region-1"

    def test_not_a_feature_collection(self):
        """Test other GeoJSON documents are rejected"""
        with pytest.raises(RegionCatalogError):
            RegionCatalog.from_geojson({"type": "Feature"})


class TestRegionService:
    """Test resolution against the stored State catalog"""

    @pytest.mark.asyncio
    async def test_resolve_to_state(self, db_session: AsyncSession, sample_state: State, factory):
        """Test a point inside a state resolves to its id"""
        service = RegionService(db_session)

        assert await service.resolve(factory.point(-121, 44)) == sample_state.id

    @pytest.mark.asyncio
    async def test_resolve_outside(self, db_session: AsyncSession, sample_state: State, factory):
        """Test a point outside every state resolves to None"""
        service = RegionService(db_session)

        assert await service.resolve(factory.point(-100, 30)) is None

    @pytest.mark.asyncio
    async def test_malformed_point_soft_fails(self, db_session: AsyncSession, sample_state: State):
        """Test resolution failures are reported as no region"""
        service = RegionService(db_session)

        assert await service.resolve(shapely.set_srid(Point(-121, 44), 3857)) is None
        assert await service.resolve(None) is None

    @pytest.mark.asyncio
    async def test_bad_state_row_is_skipped(self, db_session: AsyncSession, sample_state: State, factory):
        """Test a state with empty or non-Polygon geometry is left out of the catalog"""
        db_session.add_all([
            State(name="Broken", geom=Polygon()),
            State(name="Marker", geom=Point(-121, 44)),
        ])
        await db_session.commit()

        service = RegionService(db_session)
        catalog = await service.load_catalog()

        assert [region.name for region in catalog] == ["Oregon"]
        assert await service.resolve(factory.point(-121, 44)) == sample_state.id
