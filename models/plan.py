# models/plan.py

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, field_validator


class Plan(BaseModel):
    """Billing tier. Limits use -1 (or null) for unlimited."""

    id: str
    name: str
    display_name: Optional[str] = None
    max_properties: Optional[int] = None
    max_users: Optional[int] = None
    max_tenants: Optional[int] = None
    is_active: Optional[bool] = True
    sort_order: Optional[int] = None


class PlanLimits(BaseModel):
    """-1 means unlimited."""

    lots: int = -1
    users: int = -1
    extranet_tenants: int = -1


class Feature(BaseModel):
    """`name` is the feature key used in code (e.g. "accounting.journal")."""

    id: str
    name: str
    display_name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    is_active: Optional[bool] = True


class PlanFeature(BaseModel):
    id: Optional[str] = None
    plan_id: str
    feature_id: str
    is_enabled: bool = False
    limits: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("is_enabled", mode="before")
    @classmethod
    def _null_is_disabled(cls, v):
        return v is True

    @field_validator("limits", mode="before")
    @classmethod
    def _null_limits(cls, v):
        return v or {}


class FeatureStatus(BaseModel):
    key: str
    name: Optional[str] = None
    category: Optional[str] = None
    is_enabled: bool = False
    limits: Dict[str, Any] = Field(default_factory=dict)


class PlanFeaturesUpdate(BaseModel):
    plan_name: str
    features: Dict[str, bool]
