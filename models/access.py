# models/access.py

from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

from models.enums import Action, SecurityLevel


class _CamelModel(BaseModel):
    """Accepts and emits camelCase keys; snake_case is accepted too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AccessCheckRequest(_CamelModel):
    """
    Body of POST /security/check.

    Identity (user, organization, profile, plan) is never taken from the
    body; the route resolves it from the authenticated caller.
    """

    feature_key: Optional[str] = None
    object_type: Optional[str] = None
    object_id: Optional[str] = None  # accepted; decisions are not row-scoped
    action: Optional[Action] = None
    field_name: Optional[str] = None

    @model_validator(mode="after")
    def _check_shape(self):
        if self.object_type and self.action is None:
            raise ValueError("action is required when objectType is given")
        if self.field_name and not self.object_type:
            raise ValueError("objectType is required when fieldName is given")
        return self


class FieldFilterRequest(_CamelModel):
    """Body of POST /security/filter-fields: one record of `object_type`."""

    object_type: str
    record: Dict[str, Any]


class AccessRequest(AccessCheckRequest):
    """Full resolver input: the capability plus the caller's context."""

    plan_name: Optional[str] = None
    profile_id: Optional[str] = None
    user_id: str
    organization_id: Optional[str] = None


class PlanCheck(_CamelModel):
    feature_key: str
    enabled: bool


class ProfileCheck(_CamelModel):
    object_type: str
    action: Action
    allowed: bool


class FieldCheck(_CamelModel):
    object_type: str
    field_name: str
    action: Action
    allowed: bool


class AccessDecision(_CamelModel):
    """
    Outcome of a check. The *_check details are set for the layers that
    were evaluated: every layer on a grant, the failing one on a denial.
    """

    allowed: bool
    reason: str
    failed_level: Optional[SecurityLevel] = None
    plan_check: Optional[PlanCheck] = None
    profile_check: Optional[ProfileCheck] = None
    field_check: Optional[FieldCheck] = None


class SecurityContext(BaseModel):
    """Explicit identity threaded through every resolver call."""

    user_id: str
    organization_id: str
    profile_id: Optional[str] = None
    plan_name: Optional[str] = None
