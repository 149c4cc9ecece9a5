"""
FactorialHR resource models.

Used to validate API responses at runtime so that an upstream shape change
surfaces as SchemaValidationError instead of a KeyError deep in a caller.
"""

from typing import Any, List, Literal, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from ..errors import SchemaValidationError

M = TypeVar('M', bound=BaseModel)


class FactorialResource(BaseModel):
    """Base for API resources. Unknown fields are kept."""

    model_config = ConfigDict(extra="allow")

    id: int
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class Employee(FactorialResource):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    birthday_on: Optional[str] = None
    hired_on: Optional[str] = None
    start_date: Optional[str] = None
    terminated_on: Optional[str] = None
    gender: Optional[str] = None
    nationality: Optional[str] = None
    manager_id: Optional[int] = None
    role: Optional[str] = None
    timeoff_manager_id: Optional[int] = None
    company_id: Optional[int] = None
    legal_entity_id: Optional[int] = None
    team_ids: List[int] = Field(default_factory=list)
    location_id: Optional[int] = None


class Team(FactorialResource):
    name: str
    description: Optional[str] = None
    company_id: Optional[int] = None
    employee_ids: List[int] = Field(default_factory=list)
    lead_ids: List[int] = Field(default_factory=list)


class Location(FactorialResource):
    name: str
    country: Optional[str] = None
    phone_number: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    address_line_1: Optional[str] = None
    address_line_2: Optional[str] = None
    postal_code: Optional[str] = None
    company_id: Optional[int] = None


class Contract(FactorialResource):
    employee_id: int
    job_title: Optional[str] = None
    effective_on: Optional[str] = None


class LeaveDuration(BaseModel):
    days: float
    hours: float


class Leave(FactorialResource):
    employee_id: int
    leave_type_id: Optional[int] = None
    start_on: str
    finish_on: str
    half_day: Optional[Literal["all_day", "start", "finish"]] = None
    status: Literal["pending", "approved", "declined"] = "pending"
    description: Optional[str] = None
    deleted_at: Optional[str] = None
    duration_attributes: Optional[LeaveDuration] = None


class Shift(FactorialResource):
    employee_id: int
    clock_in: str
    clock_out: Optional[str] = None
    worked_hours: Optional[float] = None
    break_minutes: Optional[int] = None
    location: Optional[str] = None
    notes: Optional[str] = None


def _format_issues(error: PydanticValidationError) -> str:
    return ", ".join(
        f"{'.'.join(str(p) for p in issue['loc'])}: {issue['msg']}" for issue in error.errors()
    )


def parse_data(schema_name: str, model: Type[M], data: Any) -> M:
    """
    Validate one item against a model.

    Raises:
        SchemaValidationError: If the data does not match
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise SchemaValidationError(schema_name, _format_issues(e), context={"data": data})


def parse_list(schema_name: str, model: Type[M], data: Any) -> List[M]:
    """Validate a list of items, reporting the index of the first bad item."""
    if not isinstance(data, list):
        raise SchemaValidationError(schema_name, "Expected an array", context={"data": data})

    items = []
    for index, item in enumerate(data):
        try:
            items.append(model.model_validate(item))
        except PydanticValidationError as e:
            raise SchemaValidationError(f"{schema_name}[{index}]", _format_issues(e), context={"item": item})
    return items
