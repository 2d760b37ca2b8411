"""Project search filter and aggregate statistics"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from streammap.models import Affiliation, Project

logger = logging.getLogger(__name__)


def meters_to_kilometers(meters: int, places: int = 1) -> float:
    """Convert meters to kilometers, rounding half up to the given places"""
    kilometers = Decimal(meters) / Decimal(1000)
    return float(kilometers.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP))


class ProjectSearchService:
    """
    Service for filtering projects by free text and organization, and for
    computing statistics over all or a filtered subset of projects.
    """

    def __init__(self, db: AsyncSession):
        """Initialize with database session"""
        self.db = db

    @staticmethod
    def build_filter(
        search: Optional[str] = None,
        organization_ids: Optional[Sequence[UUID]] = None,
    ) -> Select:
        """
        Build the project selection for a search request.

        Without a search term (None) every project is selected and the
        organization constraint is not applied. With a term, even an empty
        one, projects whose name, watershed, or stream name contains it are
        selected; a non-empty organization set further restricts them to
        projects affiliated with at least one of those organizations.

        Args:
            search: Free-text term
            organization_ids: Organization IDs to restrict to

        Returns:
            SELECT statement over Project
        """
        statement = select(Project)

        if search is None:
            return statement

        text_match = or_(
            Project.name.contains(search, autoescape=True),
            Project.watershed.contains(search, autoescape=True),
            Project.stream_name.contains(search, autoescape=True),
        )
        statement = statement.where(text_match)

        if organization_ids:
            # EXISTS keeps multi-affiliated projects to a single row
            statement = statement.where(
                Project.affiliations.any(Affiliation.organization_id.in_(list(organization_ids)))
            )

        return statement

    async def search(
        self,
        search: Optional[str] = None,
        organization_ids: Optional[Sequence[UUID]] = None,
    ) -> List[Project]:
        """
        Get projects matching a search request, ordered by name.
        """
        statement = self.build_filter(search, organization_ids).order_by(Project.name)
        result = await self.db.execute(statement)
        projects = list(result.scalars().all())

        logger.debug(
            f"Search {search!r} with organizations {organization_ids} matched {len(projects)} project(s)"
        )
        return projects

    async def project_count(self, statement: Optional[Select] = None) -> int:
        """Number of projects in the full or filtered set"""
        subquery = (statement if statement is not None else select(Project)).subquery()
        result = await self.db.execute(select(func.count()).select_from(subquery))
        return result.scalar_one()

    async def structure_sum(self, statement: Optional[Select] = None) -> int:
        """Total number of structures in the full or filtered set"""
        subquery = (statement if statement is not None else select(Project)).subquery()
        result = await self.db.execute(
            select(func.coalesce(func.sum(subquery.c.number_of_structures), 0))
        )
        return int(result.scalar_one())

    async def project_total_length_km(self, statement: Optional[Select] = None) -> float:
        """Total project length in kilometers, rounded to one decimal"""
        subquery = (statement if statement is not None else select(Project)).subquery()
        result = await self.db.execute(
            select(func.coalesce(func.sum(subquery.c.length), 0))
        )
        return meters_to_kilometers(int(result.scalar_one()))
