"""Tests for project search and statistics"""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from streammap.models import Organization, User
from streammap.services.project_service import ProjectService
from streammap.services.search_service import ProjectSearchService, meters_to_kilometers


@pytest_asyncio.fixture
async def organizations(db_session: AsyncSession):
    """Two organizations for filtering"""
    upper = Organization(name="Upper Deschutes Watershed Council")
    crooked = Organization(name="Crooked River Watershed Council")
    db_session.add_all([upper, crooked])
    await db_session.commit()
    return upper, crooked


@pytest_asyncio.fixture
async def projects(
    project_service: ProjectService,
    project_attributes: dict,
    sample_user: User,
    organizations,
):
    """
    Four projects where "Creek" appears in a name, a stream name, and a
    watershed, and one project matches nothing
    """
    upper, crooked = organizations
    rows = [
        (
            {"name": "Whychus Creek Restoration", "stream_name": "Whychus", "watershed": "Upper Deschutes",
             "length": 15234, "number_of_structures": 42},
            [upper.id, crooked.id],
        ),
        (
            {"name": "Meadow Reconnection", "stream_name": "Bridge Creek", "watershed": "John Day",
             "length": 3200, "number_of_structures": 121},
            [upper.id],
        ),
        (
            {"name": "Floodplain Work", "stream_name": "Trout Run", "watershed": "Crooked Creek Basin",
             "length": 800, "number_of_structures": 5},
            [crooked.id],
        ),
        (
            {"name": "Channel Work", "stream_name": "Silver River", "watershed": "Klamath",
             "length": 1000, "number_of_structures": 3},
            [],
        ),
    ]

    saved = {}
    for overrides, organization_ids in rows:
        attributes = dict(project_attributes, **overrides)
        result = await project_service.create(
            attributes, author_id=sample_user.id, organization_ids=organization_ids
        )
        assert result.ok, result.errors
        saved[result.project.name] = result.project
    return saved


def names(projects):
    return sorted(project.name for project in projects)


@pytest.mark.asyncio
class TestSearch:
    """Test the search filter"""

    async def test_no_search_returns_all(self, db_session: AsyncSession, projects):
        """Test a missing term selects every project"""
        service = ProjectSearchService(db_session)

        assert len(await service.search()) == 4
        assert len(await service.search(None, [])) == 4

    async def test_missing_term_ignores_organizations(self, db_session: AsyncSession, projects, organizations):
        """Test the organization filter only applies alongside a term"""
        upper, _ = organizations
        service = ProjectSearchService(db_session)

        assert len(await service.search(None, [upper.id])) == 4

    async def test_empty_term_matches_everything(self, db_session: AsyncSession, projects):
        """Test an empty term is a term that every project contains"""
        service = ProjectSearchService(db_session)

        assert len(await service.search("")) == 4

    async def test_empty_term_applies_organization_filter(
        self, db_session: AsyncSession, projects, organizations
    ):
        """Test an empty term still restricts to the given organizations"""
        upper, _ = organizations
        service = ProjectSearchService(db_session)

        result = await service.search("", [upper.id])

        assert names(result) == ["Meadow Reconnection", "Whychus Creek Restoration"]

    async def test_whitespace_term_is_matched_literally(self, db_session: AsyncSession, projects):
        """Test a whitespace term is searched for rather than treated as missing"""
        service = ProjectSearchService(db_session)

        assert await service.search("   ") == []

    async def test_text_matches_name_stream_or_watershed(self, db_session: AsyncSession, projects):
        """Test the term is matched against all three text fields"""
        service = ProjectSearchService(db_session)

        result = await service.search("Creek")

        assert names(result) == ["Floodplain Work", "Meadow Reconnection", "Whychus Creek Restoration"]

    async def test_results_ordered_by_name(self, db_session: AsyncSession, projects):
        """Test results come back in name order"""
        service = ProjectSearchService(db_session)

        result = await service.search("Creek")

        assert [p.name for p in result] == names(result)

    async def test_organization_filter(self, db_session: AsyncSession, projects, organizations):
        """Test a term with organizations selects only affiliated matches"""
        upper, _ = organizations
        service = ProjectSearchService(db_session)

        result = await service.search("Creek", [upper.id])

        assert names(result) == ["Meadow Reconnection", "Whychus Creek Restoration"]

    async def test_multi_affiliated_project_appears_once(
        self, db_session: AsyncSession, projects, organizations
    ):
        """Test a project affiliated with several selected organizations is not duplicated"""
        upper, crooked = organizations
        service = ProjectSearchService(db_session)

        result = await service.search("Creek", [upper.id, crooked.id])

        assert names(result) == ["Floodplain Work", "Meadow Reconnection", "Whychus Creek Restoration"]
        assert await service.project_count(service.build_filter("Creek", [upper.id, crooked.id])) == 3

    async def test_empty_organization_list_is_no_constraint(self, db_session: AsyncSession, projects):
        """Test an empty organization set does not restrict the search"""
        service = ProjectSearchService(db_session)

        assert len(await service.search("Creek", [])) == 3

    async def test_like_wildcards_are_literal(self, db_session: AsyncSession, projects):
        """Test wildcard characters in the term are matched literally"""
        service = ProjectSearchService(db_session)

        assert await service.search("%") == []
        assert await service.search("_") == []


@pytest.mark.asyncio
class TestStatistics:
    """Test aggregate statistics"""

    async def test_statistics_over_all_projects(self, db_session: AsyncSession, projects):
        """Test aggregates without a filter"""
        service = ProjectSearchService(db_session)

        assert await service.project_count() == 4
        assert await service.structure_sum() == 171
        assert await service.project_total_length_km() == 20.2

    async def test_statistics_over_filtered_projects(self, db_session: AsyncSession, projects):
        """Test aggregates over a search result"""
        service = ProjectSearchService(db_session)
        statement = service.build_filter("Whychus")

        assert await service.project_count(statement) == 1
        assert await service.structure_sum(statement) == 42
        assert await service.project_total_length_km(statement) == 15.2

    async def test_statistics_over_empty_set(self, db_session: AsyncSession, projects):
        """Test aggregates of an empty selection are zero"""
        service = ProjectSearchService(db_session)
        statement = service.build_filter("Nonexistent")

        assert await service.project_count(statement) == 0
        assert await service.structure_sum(statement) == 0
        assert await service.project_total_length_km(statement) == 0.0

    async def test_statistics_without_projects(self, db_session: AsyncSession):
        """Test aggregates on an empty table are zero"""
        service = ProjectSearchService(db_session)

        assert await service.project_count() == 0
        assert await service.structure_sum() == 0
        assert await service.project_total_length_km() == 0.0


class TestMetersToKilometers:
    """Test length conversion"""

    @pytest.mark.parametrize(
        "meters,expected",
        [(15234, 15.2), (15250, 15.3), (15249, 15.2), (0, 0.0), (999, 1.0), (50, 0.1)],
    )
    def test_conversion(self, meters, expected):
        """Test meters are converted and rounded half up to one decimal"""
        assert meters_to_kilometers(meters) == expected
