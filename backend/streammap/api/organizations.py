"""Organization and state catalog endpoints"""

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from streammap.database import get_db
from streammap.models import Organization, State
from streammap.schemas.organization import (
    OrganizationListResponse,
    OrganizationResponse,
    StateListResponse,
    StateResponse,
)

router = APIRouter(prefix="/api/v1", tags=["Catalog"])


@router.get("/organizations", response_model=OrganizationListResponse, status_code=status.HTTP_200_OK)
async def get_organizations(db: AsyncSession = Depends(get_db)):
    """
    Get all organizations, ordered by name, for the project search filter
    """
    result = await db.execute(select(Organization).order_by(Organization.name))
    organizations = result.scalars().all()

    return OrganizationListResponse(
        organizations=[OrganizationResponse.model_validate(o) for o in organizations]
    )


@router.get("/states", response_model=StateListResponse, status_code=status.HTTP_200_OK)
async def get_states(db: AsyncSession = Depends(get_db)):
    """Get the names of all states in the region catalog"""
    result = await db.execute(select(State).order_by(State.name))
    states = result.scalars().all()

    return StateListResponse(states=[StateResponse.model_validate(s) for s in states])
