"""Pydantic request/response schemas used by the API.

Schemas keep API input/output shapes stable. Every model speaks
camelCase on the wire (`costPrice`, `sensorName`, ...) while Python code
keeps snake_case attribute names.

Payload (`*In`) models declare every field optional: a missing value is
not a parsing error, it is reported by the explicit validation functions
in `validation.py` together with the other constraint violations.
"""

import uuid
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .models import SensorLocationType

T = TypeVar("T")


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        allow_inf_nan=False,
    )


class RegisterIn(BaseModel):
    """Payload for the user registration endpoint."""
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserOut(ApiModel):
    id: int
    username: str


class PrincipalOut(ApiModel):
    """The authenticated identity attached to a request (credentials omitted)."""
    username: str
    roles: List[str]


class CsrfTokenOut(ApiModel):
    token: str
    header_name: str


class HeaterIn(ApiModel):
    text: Optional[str] = None


class HeaterOut(ApiModel):
    id: int
    text: str


class FruitIn(ApiModel):
    fruit_image_url: Optional[str] = None
    fruit_name: Optional[str] = None
    fruit_vendor: Optional[str] = None


class FruitOut(ApiModel):
    id: int
    fruit_image_url: str
    fruit_name: str
    fruit_vendor: str


class OfferIn(ApiModel):
    badge_color: Optional[str] = None
    description: Optional[str] = None


class OfferOut(ApiModel):
    id: int
    badge_color: str
    description: str


class FruitProductIn(ApiModel):
    cost_price: Optional[float] = None
    fruit_id: Optional[int] = None
    offer_id: Optional[int] = None
    packaged_quantity: Optional[str] = None
    selling_price: Optional[float] = None


class FruitProductOut(ApiModel):
    """A fruit product with its `fruit` and `offer` loaded alongside the ids."""
    id: int
    cost_price: float
    fruit_id: int
    offer_id: Optional[int] = None
    packaged_quantity: str
    selling_price: float
    fruit: Optional[FruitOut] = None
    offer: Optional[OfferOut] = None


class SensorLocationIn(ApiModel):
    sensor_location_text: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    sensor_location_type: Optional[SensorLocationType] = None


class SensorLocationOut(ApiModel):
    id: uuid.UUID
    sensor_location_text: str
    latitude: float
    longitude: float
    sensor_location_type: SensorLocationType


class SensorSystemIn(ApiModel):
    sensor_name: Optional[str] = None
    sensor_location_id: Optional[uuid.UUID] = None


class SensorSystemOut(ApiModel):
    id: uuid.UUID
    sensor_name: str
    sensor_location_id: Optional[uuid.UUID] = None
    sensor_location: Optional[SensorLocationOut] = None


class PagedResult(ApiModel, Generic[T]):
    """One page of a sorted collection plus navigation metadata.

    `pageNumber` is 1-based. An empty collection reports `totalPages == 0`
    with both `isFirst` and `isLast` set.
    """
    data: List[T]
    total_elements: int
    page_number: int
    total_pages: int
    is_first: bool
    is_last: bool
    has_next: bool
    has_previous: bool


class Violation(BaseModel):
    field: str
    message: str


class Problem(BaseModel):
    """Problem details body served as `application/problem+json`."""
    type: str
    title: str
    status: int
    detail: Optional[str] = None
    violations: Optional[List[Violation]] = None
