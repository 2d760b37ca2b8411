"""Project record lifecycle: validate, normalize, resolve region, persist"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union
from uuid import UUID

from pydantic import ValidationError
from sqlalchemy import inspect, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from streammap.config import settings
from streammap.models import Affiliation, Organization, Photo, Project
from streammap.monitoring.metrics import record_project_save
from streammap.schemas.attributes import BLANK_MESSAGE, OrganizationIdList, field_errors
from streammap.services.coordinate_service import (
    CoordinateService,
    GeometryFactory,
    MissingCoordinatesError,
    is_blank,
)
from streammap.services.region_service import RegionService
from streammap.services.validation_service import ProjectValidator, ValidationResult

logger = logging.getLogger(__name__)

# Persisted attributes a client may set directly
PROJECT_FIELDS = (
    "name",
    "stream_name",
    "implementation_date",
    "primary_contact",
    "narrative",
    "structure_description",
    "watershed",
    "url",
    "length",
    "number_of_structures",
    "affiliation_legacy",
)

COORDINATE_FIELDS = ("latitude", "longitude")

UNKNOWN_ORGANIZATIONS_MESSAGE = "contains unknown organizations"


@dataclass
class SaveResult:
    """Outcome of a project save attempt"""
    project: Optional[Project]
    errors: List[Dict[str, str]] = field(default_factory=list)
    aborted: bool = False

    @property
    def ok(self) -> bool:
        return not self.errors and not self.aborted


class ProjectService:
    """
    Service for creating, updating, and deleting project records.

    Every save runs the same ordered pipeline:
    validate -> normalize coordinates -> resolve region -> persist.
    """

    def __init__(
        self,
        db: AsyncSession,
        coordinate_service: Optional[CoordinateService] = None,
        region_service: Optional[RegionService] = None,
        validator: Optional[ProjectValidator] = None,
    ):
        """Initialize with database session and pipeline collaborators"""
        self.db = db
        self.coordinate_service = coordinate_service or CoordinateService(
            GeometryFactory(settings.region_srid),
            precision=settings.coordinate_precision,
        )
        self.region_service = region_service or RegionService(db)
        self.validator = validator or ProjectValidator()

    async def get(self, project_id: UUID) -> Optional[Project]:
        """
        Get a project with its affiliations, organizations, photos, state,
        and author loaded.
        """
        result = await self.db.execute(
            select(Project)
            .where(Project.id == project_id)
            .options(
                selectinload(Project.affiliations).selectinload(Affiliation.organization),
                selectinload(Project.organizations),
                selectinload(Project.photos),
                selectinload(Project.state),
                selectinload(Project.author),
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def create(
        self,
        attributes: Dict[str, Any],
        author_id: UUID,
        organization_ids: Sequence[Union[UUID, str]] = (),
        photos: Sequence[Any] = (),
    ) -> SaveResult:
        """
        Validate and persist a new project.

        Args:
            attributes: Raw project attributes, including latitude/longitude
            author_id: ID of the authoring user
            organization_ids: Organizations the project is affiliated with
            photos: Attachment metadata (filename, content_type, byte_size,
                storage_key)

        Returns:
            SaveResult with the saved project, or the collected errors
        """
        validation = self.validator.validate(attributes, photos)
        organizations = await self._load_organizations(organization_ids, validation)

        if not validation.is_valid:
            return self._invalid(None, validation)

        cleaned = validation.cleaned
        project = Project(
            author_id=author_id,
            **{name: cleaned.get(name) for name in PROJECT_FIELDS},
        )
        project.latitude = cleaned["latitude"]
        project.longitude = cleaned["longitude"]

        await self._set_affiliations(project, organizations)
        self._attach_photos(project, photos)

        return await self.save(project)

    async def update(
        self,
        project: Project,
        changes: Dict[str, Any],
        organization_ids: Optional[Sequence[Union[UUID, str]]] = None,
        photos: Sequence[Any] = (),
    ) -> SaveResult:
        """
        Validate and persist changes to an existing project.

        Coordinates not present in ``changes`` are taken from the stored
        point. New photos are appended to the existing attachments. When
        ``organization_ids`` is given it replaces the current affiliations.

        Args:
            project: Project loaded through ``get``
            changes: Raw attribute changes
            organization_ids: Replacement organization set, or None to keep
            photos: Additional attachment metadata

        Returns:
            SaveResult with the saved project, or the collected errors
        """
        attributes = {name: getattr(project, name) for name in PROJECT_FIELDS}
        attributes["latitude"] = project.point_latitude
        attributes["longitude"] = project.point_longitude
        attributes.update(changes)

        validation = self.validator.validate(attributes, list(project.photos) + list(photos))
        organizations = None
        if organization_ids is not None:
            organizations = await self._load_organizations(organization_ids, validation)

        if not validation.is_valid:
            return self._invalid(project, validation)

        cleaned = validation.cleaned
        for name in PROJECT_FIELDS:
            setattr(project, name, cleaned.get(name))
        project.latitude = cleaned["latitude"]
        project.longitude = cleaned["longitude"]

        if organizations is not None:
            await self._set_affiliations(project, organizations)
        self._attach_photos(project, photos)

        return await self.save(project)

    async def save(self, project: Project) -> SaveResult:
        """
        Derive the canonical point and region, then persist.

        A project without both coordinates is not saved: pending changes on
        a persistent project are discarded and the derived ``lonlat`` and
        ``state_id`` are left untouched.

        Args:
            project: Validated project carrying raw latitude/longitude

        Returns:
            SaveResult; ``aborted`` is set when coordinates are missing
        """
        try:
            lonlat = self.coordinate_service.normalize(project.latitude, project.longitude)
        except MissingCoordinatesError as e:
            logger.warning(f"Aborting save of project {project.id}: {e}")
            if inspect(project).persistent:
                # Drop pending changes before reloading so none are flushed
                self.db.expire(project)
                await self.db.refresh(project)
            record_project_save("aborted")
            return SaveResult(
                project=project,
                errors=[
                    {"field": name, "message": BLANK_MESSAGE}
                    for name in COORDINATE_FIELDS
                    if is_blank(getattr(project, name))
                ],
                aborted=True,
            )

        project.lonlat = lonlat
        project.state_id = await self.region_service.resolve(lonlat)

        self.db.add(project)
        await self.db.commit()

        logger.info(f"Saved project {project.id} at {lonlat.wkt} (state_id={project.state_id})")
        record_project_save("saved")

        return SaveResult(project=await self.get(project.id))

    async def delete(self, project: Project) -> None:
        """
        Delete a project together with its affiliations and photos.
        Affiliated organizations are kept.
        """
        affiliations = await self.db.execute(
            select(Affiliation).where(Affiliation.project_id == project.id)
        )
        for affiliation in affiliations.scalars().all():
            await self.db.delete(affiliation)

        photos = await self.db.execute(
            select(Photo).where(Photo.project_id == project.id)
        )
        for photo in photos.scalars().all():
            await self.db.delete(photo)

        await self.db.delete(project)
        await self.db.commit()

        logger.info(f"Deleted project {project.id}")

    async def _load_organizations(
        self,
        organization_ids: Sequence[Union[UUID, str]],
        validation: ValidationResult,
    ) -> List[Organization]:
        """Fetch organizations by id, recording an error for malformed or unknown ids"""
        try:
            wanted = set(OrganizationIdList.validate_python(list(organization_ids or ())))
        except ValidationError as e:
            validation.errors.extend(field_errors(e, field_name="organization_ids"))
            return []
        if not wanted:
            return []

        result = await self.db.execute(
            select(Organization).where(Organization.id.in_(wanted))
        )
        organizations = list(result.scalars().all())

        if len(organizations) != len(wanted):
            validation.add_error("organization_ids", UNKNOWN_ORGANIZATIONS_MESSAGE)
        return organizations

    async def _set_affiliations(self, project: Project, organizations: List[Organization]) -> None:
        """Replace a project's affiliations, deleting the ones no longer wanted"""
        wanted = {organization.id: organization for organization in organizations}

        kept = []
        for affiliation in list(project.affiliations):
            if affiliation.organization_id in wanted:
                kept.append(affiliation)
                wanted.pop(affiliation.organization_id)
            else:
                await self.db.delete(affiliation)

        project.affiliations = kept + [
            Affiliation(organization_id=organization_id) for organization_id in wanted
        ]
        project.affiliations_count = len(project.affiliations)

    def _attach_photos(self, project: Project, photos: Sequence[Any]) -> None:
        for photo in photos:
            project.photos.append(
                Photo(
                    filename=photo.filename,
                    content_type=photo.content_type,
                    byte_size=photo.byte_size,
                    storage_key=getattr(photo, "storage_key", None),
                )
            )

    def _invalid(self, project: Optional[Project], validation: ValidationResult) -> SaveResult:
        logger.info(f"Project validation failed with {len(validation.errors)} error(s)")
        record_project_save("invalid")
        return SaveResult(project=project, errors=validation.errors)
