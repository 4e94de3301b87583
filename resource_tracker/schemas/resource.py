"""Resource schemas for request/response validation."""
import math
from datetime import datetime
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, field_validator

from resource_tracker.models.resource import ResourceCategory, ResourceStatus


def parse_optional_number(value: Any) -> Optional[float]:
    """Coerce form input to a non-negative number, blank meaning absent."""
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    if isinstance(value, bool):
        raise ValueError("must be a non-negative number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError("must be a non-negative number")
    if math.isnan(number) or math.isinf(number) or number < 0:
        raise ValueError("must be a non-negative number")
    return number


def blank_to_none(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def require_title(value: Any) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError("is required")
    return value.strip() if isinstance(value, str) else value


OptionalNumber = Annotated[Optional[float], BeforeValidator(parse_optional_number)]
OptionalText = Annotated[Optional[str], BeforeValidator(blank_to_none)]
Title = Annotated[str, BeforeValidator(require_title)]


class ResourceBase(BaseModel):
    """Base resource schema."""
    title: str
    description: Optional[str] = None
    category: str = ResourceCategory.EQUIPMENT.value
    status: str = ResourceStatus.AVAILABLE.value
    quantity: Optional[float] = None
    unit: Optional[str] = None
    cost: Optional[float] = None
    supplier: Optional[str] = None
    url: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    minimum_stock: Optional[float] = None


class ResourceCreate(ResourceBase):
    """Schema for creating a resource."""
    title: Title
    description: OptionalText = None
    category: ResourceCategory = ResourceCategory.EQUIPMENT
    status: ResourceStatus = ResourceStatus.AVAILABLE
    quantity: OptionalNumber = None
    unit: OptionalText = None
    cost: OptionalNumber = None
    supplier: OptionalText = None
    url: OptionalText = None
    location: OptionalText = None
    notes: OptionalText = None
    minimum_stock: OptionalNumber = None


class ResourceUpdate(BaseModel):
    """Schema for updating a resource."""
    title: Optional[Title] = None
    description: OptionalText = None
    category: Optional[ResourceCategory] = None
    status: Optional[ResourceStatus] = None
    quantity: OptionalNumber = None
    unit: OptionalText = None
    cost: OptionalNumber = None
    supplier: OptionalText = None
    url: OptionalText = None
    location: OptionalText = None
    notes: OptionalText = None
    minimum_stock: OptionalNumber = None

    @field_validator("title", "category", "status", mode="before")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        # Leaving these out keeps the stored value; clearing them is not allowed
        if value is None:
            raise ValueError("is required")
        return value


class Resource(ResourceBase):
    """A stored resource as returned by the data service."""
    id: str
    user_id: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def last_modified(self) -> datetime:
        return self.updated_at or self.created_at


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class ResourceDraft(BaseModel):
    """Editable text draft backing the add/edit resource form."""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    title: str = ""
    description: str = ""
    category: str = ResourceCategory.EQUIPMENT.value
    status: str = ResourceStatus.AVAILABLE.value
    quantity: str = ""
    unit: str = ""
    cost: str = ""
    supplier: str = ""
    url: str = ""
    location: str = ""
    notes: str = ""
    minimum_stock: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def none_to_blank(cls, value: Any) -> Any:
        return "" if value is None else value

    @classmethod
    def from_resource(cls, resource: Resource) -> "ResourceDraft":
        values = resource.model_dump(include=set(cls.model_fields))
        return cls(**{field: _as_text(value) for field, value in values.items()})


class MonthlyCount(BaseModel):
    """Number of resources created in one calendar month."""
    date: str
    resources: int


class ResourceStats(BaseModel):
    """Aggregate statistics over the resource collection."""
    total: int
    by_category: Dict[str, int]
    by_status: Dict[str, int]
    recent_activity: List[Resource]
    by_month: List[MonthlyCount] = []


class ResourceListResponse(BaseModel):
    """Resource list view: filtered resources plus collection flags."""
    resources: List[Resource]
    total: int
    loading: bool
    error: Optional[str] = None
    categories: List[str]
    statuses: List[str]
