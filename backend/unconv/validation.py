"""Explicit payload validation.

There is one function per payload type. Each returns the violations it
finds as an ordered list, following the order the fields are declared
in the payload model, so clients always see the same first violation
for the same input. An empty list means the payload is valid.
"""

from typing import List

from . import schemas
from .problems import ValidationFailed
from .schemas import Violation


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _require(violations: List[Violation], field: str, value, message: str) -> bool:
    if _blank(value):
        violations.append(Violation(field=field, message=message))
        return False
    return True


def _non_negative(violations: List[Violation], field: str, value, message: str) -> None:
    if value is not None and value < 0:
        violations.append(Violation(field=field, message=message))


def _between(violations: List[Violation], field: str, value, low: float, high: float, message: str) -> None:
    if value is not None and not low <= value <= high:
        violations.append(Violation(field=field, message=message))


def validate_heater(payload: schemas.HeaterIn) -> List[Violation]:
    violations: List[Violation] = []
    _require(violations, "text", payload.text, "Text cannot be empty")
    return violations


def validate_fruit(payload: schemas.FruitIn) -> List[Violation]:
    violations: List[Violation] = []
    _require(violations, "fruitImageUrl", payload.fruit_image_url, "Fruit image URL cannot be empty")
    _require(violations, "fruitName", payload.fruit_name, "Fruit name cannot be empty")
    _require(violations, "fruitVendor", payload.fruit_vendor, "Fruit vendor cannot be empty")
    return violations


def validate_offer(payload: schemas.OfferIn) -> List[Violation]:
    violations: List[Violation] = []
    _require(violations, "badgeColor", payload.badge_color, "Badge color cannot be empty")
    _require(violations, "description", payload.description, "Description cannot be empty")
    return violations


def validate_fruit_product(payload: schemas.FruitProductIn) -> List[Violation]:
    """Validate a fruit product payload.

    `offerId` is optional and only checked for existence by the service.
    """
    violations: List[Violation] = []
    if _require(violations, "costPrice", payload.cost_price, "Cost price cannot be empty"):
        _non_negative(violations, "costPrice", payload.cost_price, "Cost price cannot be negative")
    _require(violations, "fruitId", payload.fruit_id, "Fruit cannot be empty")
    _require(violations, "packagedQuantity", payload.packaged_quantity, "Packaged quantity cannot be empty")
    if _require(violations, "sellingPrice", payload.selling_price, "Selling price cannot be empty"):
        _non_negative(violations, "sellingPrice", payload.selling_price, "Selling price cannot be negative")
    return violations


def validate_sensor_location(payload: schemas.SensorLocationIn) -> List[Violation]:
    violations: List[Violation] = []
    _require(violations, "sensorLocationText", payload.sensor_location_text, "Sensor location text cannot be empty")
    if _require(violations, "latitude", payload.latitude, "Latitude cannot be empty"):
        _between(violations, "latitude", payload.latitude, -90.0, 90.0, "Latitude must be between -90 and 90")
    if _require(violations, "longitude", payload.longitude, "Longitude cannot be empty"):
        _between(violations, "longitude", payload.longitude, -180.0, 180.0, "Longitude must be between -180 and 180")
    _require(violations, "sensorLocationType", payload.sensor_location_type, "Sensor location type cannot be empty")
    return violations


def validate_sensor_system(payload: schemas.SensorSystemIn) -> List[Violation]:
    violations: List[Violation] = []
    _require(violations, "sensorName", payload.sensor_name, "Sensor name cannot be empty")
    return violations


VALIDATORS = {
    schemas.HeaterIn: validate_heater,
    schemas.FruitIn: validate_fruit,
    schemas.OfferIn: validate_offer,
    schemas.FruitProductIn: validate_fruit_product,
    schemas.SensorLocationIn: validate_sensor_location,
    schemas.SensorSystemIn: validate_sensor_system,
}


def validate(payload) -> List[Violation]:
    """Dispatch to the validation function registered for `type(payload)`."""
    try:
        validator = VALIDATORS[type(payload)]
    except KeyError:
        raise TypeError(f"no validator registered for {type(payload).__name__}") from None
    return validator(payload)


def ensure_valid(payload) -> None:
    """Raise `ValidationFailed` if `payload` has any violation."""
    violations = validate(payload)
    if violations:
        raise ValidationFailed(violations)
