from typing import List, Optional
from uuid import UUID
from pydantic import Field

from shared.core.schemas import RecordOut
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class FeatureFlagCreate(EmptyStringModel):
    key: str
    name: str
    description: Optional[str] = None
    enabled: bool = False
    organization_id: Optional[UUID] = None
    rollout_percentage: int = Field(default=100, ge=0, le=100)


class FeatureFlagUpdate(EmptyStringModel):
    name: Optional[str] = None
    description: Optional[str] = None
    enabled: Optional[bool] = None
    rollout_percentage: Optional[int] = Field(default=None, ge=0, le=100)


class FeatureFlagOut(RecordOut):
    key: str
    name: str
    description: Optional[str] = None
    enabled: bool
    rollout_percentage: int


class FeatureFlagListResponse(EmptyStringModel):
    feature_flags: List[FeatureFlagOut]
    total: int


class FeatureFlagEvaluation(EmptyStringModel):
    key: str
    enabled: bool
