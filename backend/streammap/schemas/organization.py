"""Organization and state schemas"""

from pydantic import BaseModel, ConfigDict
from uuid import UUID


class OrganizationResponse(BaseModel):
    """Organization response schema"""
    id: UUID
    name: str

    model_config = ConfigDict(from_attributes=True)


class OrganizationListResponse(BaseModel):
    """List of organizations response"""
    organizations: list[OrganizationResponse]


class StateResponse(BaseModel):
    """State (region) response schema"""
    id: UUID
    name: str

    model_config = ConfigDict(from_attributes=True)


class StateListResponse(BaseModel):
    """List of states response"""
    states: list[StateResponse]
