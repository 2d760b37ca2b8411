"""Project management endpoints"""

from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, Request, Response, status

from streammap.api.dependencies import get_current_user, get_project_service, get_search_service
from streammap.api.errors import ProblemDetail, forbidden_error, not_found_error, validation_error
from streammap.config import settings
from streammap.models import User
from streammap.schemas.project import (
    MapConfig,
    ProjectCreate,
    ProjectDetailResponse,
    ProjectListResponse,
    ProjectMapResponse,
    ProjectMarker,
    ProjectResponse,
    ProjectStatsResponse,
    ProjectUpdate,
)
from streammap.services.project_service import ProjectService
from streammap.services.search_service import ProjectSearchService

router = APIRouter(prefix="/api/v1/projects", tags=["Projects"])

RELATION_FIELDS = {"organization_ids", "photos"}

PROBLEM_RESPONSES = {
    400: {"model": ProblemDetail, "description": "Validation failed"},
    401: {"description": "Missing or invalid bearer token"},
    403: {"model": ProblemDetail, "description": "Not the project author"},
    404: {"model": ProblemDetail, "description": "Project not found"},
}


def _search_params(
    search: Optional[str] = Query(None, description="Matches project name, watershed, or stream name"),
    organization_ids: Optional[List[UUID]] = Query(None, description="Restrict a search to these organizations"),
) -> dict:
    return {"search": search, "organization_ids": organization_ids}


@router.get("", response_model=ProjectListResponse, status_code=status.HTTP_200_OK)
async def get_projects(
    params: dict = Depends(_search_params),
    search_service: ProjectSearchService = Depends(get_search_service),
):
    """
    Get projects matching an optional search term and organization filter

    Without a search term all projects are returned
    """
    projects = await search_service.search(**params)

    return ProjectListResponse(
        projects=[ProjectResponse.model_validate(p) for p in projects],
        total=len(projects),
    )


@router.get("/map", response_model=ProjectMapResponse, status_code=status.HTTP_200_OK)
async def get_project_map(
    params: dict = Depends(_search_params),
    search_service: ProjectSearchService = Depends(get_search_service),
):
    """
    Get map markers for matching projects plus the initial map view
    """
    projects = await search_service.search(**params)

    return ProjectMapResponse(
        projects=[ProjectMarker.from_project(p) for p in projects],
        map=MapConfig(
            center_latitude=settings.map_center_latitude,
            center_longitude=settings.map_center_longitude,
            zoom=settings.map_zoom,
            max_zoom=settings.map_max_zoom,
            tile_url=settings.map_tile_url,
            attribution=settings.map_attribution,
        ),
    )


@router.get("/stats", response_model=ProjectStatsResponse, status_code=status.HTTP_200_OK)
async def get_project_stats(
    params: dict = Depends(_search_params),
    search_service: ProjectSearchService = Depends(get_search_service),
):
    """
    Get project count, structure total, and total length in kilometers
    over all or filtered projects
    """
    statement = search_service.build_filter(**params)

    return ProjectStatsResponse(
        project_count=await search_service.project_count(statement),
        structure_sum=await search_service.structure_sum(statement),
        project_total_length_km=await search_service.project_total_length_km(statement),
    )


@router.post(
    "", response_model=ProjectDetailResponse, status_code=status.HTTP_201_CREATED, responses=PROBLEM_RESPONSES
)
async def create_project(
    payload: ProjectCreate,
    request: Request,
    project_service: ProjectService = Depends(get_project_service),
    current_user: User = Depends(get_current_user),
):
    """
    Create a project authored by the authenticated user

    Every validation failure is reported in a single 400 response
    """
    result = await project_service.create(
        payload.model_dump(exclude=RELATION_FIELDS),
        author_id=current_user.id,
        organization_ids=payload.organization_ids,
        photos=payload.photos,
    )

    if not result.ok:
        return validation_error(errors=result.errors, instance=request.url.path)

    return ProjectDetailResponse.model_validate(result.project)


@router.get("/{project_id}", response_model=ProjectDetailResponse, status_code=status.HTTP_200_OK)
async def get_project(
    project_id: UUID,
    request: Request,
    project_service: ProjectService = Depends(get_project_service),
):
    """
    Get a project with its title, byline, location, state, organizations,
    and photos
    """
    project = await project_service.get(project_id)

    if not project:
        return not_found_error(f"Project with id {project_id} not found", instance=request.url.path)

    return ProjectDetailResponse.model_validate(project)


async def _get_authored_project(
    project_id: UUID,
    request: Request,
    project_service: ProjectService,
    current_user: User,
):
    """Load a project the current user may modify, or the error response"""
    project = await project_service.get(project_id)

    if not project:
        return None, not_found_error(f"Project with id {project_id} not found", instance=request.url.path)

    if project.author_id != current_user.id:
        return None, forbidden_error(
            "You do not have permission to modify this project", instance=request.url.path
        )

    return project, None


@router.patch(
    "/{project_id}", response_model=ProjectDetailResponse, status_code=status.HTTP_200_OK, responses=PROBLEM_RESPONSES
)
async def update_project(
    project_id: UUID,
    payload: ProjectUpdate,
    request: Request,
    project_service: ProjectService = Depends(get_project_service),
    current_user: User = Depends(get_current_user),
):
    """
    Update a project

    Only the author can update the project. Coordinates left out of the
    request keep their stored values.
    """
    project, error = await _get_authored_project(project_id, request, project_service, current_user)
    if error:
        return error

    organization_ids = None
    if "organization_ids" in payload.model_fields_set:
        organization_ids = payload.organization_ids

    result = await project_service.update(
        project,
        payload.model_dump(exclude_unset=True, exclude=RELATION_FIELDS),
        organization_ids=organization_ids,
        photos=payload.photos,
    )

    if not result.ok:
        return validation_error(errors=result.errors, instance=request.url.path)

    return ProjectDetailResponse.model_validate(result.project)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT, responses=PROBLEM_RESPONSES)
async def delete_project(
    project_id: UUID,
    request: Request,
    project_service: ProjectService = Depends(get_project_service),
    current_user: User = Depends(get_current_user),
):
    """
    Delete a project with its affiliations and photos

    Affiliated organizations are kept. Only the author can delete the project.
    """
    project, error = await _get_authored_project(project_id, request, project_service, current_user)
    if error:
        return error

    await project_service.delete(project)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
