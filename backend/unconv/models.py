"""SQLModel data models.

This module defines the application's database tables using SQLModel.
Relations between tables are plain foreign-key columns; related rows are
loaded explicitly by the services and nothing cascades on delete.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlmodel import SQLModel, Field


class UnconvUser(SQLModel, table=True):
    """A registered user.

    Fields:
    - `username`: unique login name
    - `password`: hashed password string (never store plaintext)
    - `roles`: comma separated role names, `USER` by default
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(index=True, nullable=False, unique=True)
    password: str
    roles: str = "USER"
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def role_set(self) -> set:
        return {r.strip().upper() for r in self.roles.split(",") if r.strip()}


class Heater(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    text: str = Field(nullable=False)


class Fruit(SQLModel, table=True):
    """A fruit as listed by a vendor."""
    id: Optional[int] = Field(default=None, primary_key=True)
    fruit_image_url: str
    fruit_name: str = Field(index=True)
    fruit_vendor: str


class Offer(SQLModel, table=True):
    """A promotional badge that can be attached to a `FruitProduct`."""
    id: Optional[int] = Field(default=None, primary_key=True)
    badge_color: str
    description: str


class FruitProduct(SQLModel, table=True):
    """A packaged, priced fruit offering.

    `fruit_id` is required; `offer_id` is optional.
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    cost_price: float
    fruit_id: int = Field(foreign_key='fruit.id', index=True)
    offer_id: Optional[int] = Field(default=None, foreign_key='offer.id', index=True)
    packaged_quantity: str
    selling_price: float


class SensorLocationType(str, Enum):
    INDOOR = "INDOOR"
    OUTDOOR = "OUTDOOR"


class SensorLocation(SQLModel, table=True):
    """A named geographic point a sensor system can be installed at."""
    id: Optional[uuid.UUID] = Field(default_factory=uuid.uuid4, primary_key=True)
    sensor_location_text: str
    latitude: float
    longitude: float
    sensor_location_type: SensorLocationType


class SensorSystem(SQLModel, table=True):
    """A sensor installation, optionally pinned to a `SensorLocation`."""
    id: Optional[uuid.UUID] = Field(default_factory=uuid.uuid4, primary_key=True)
    sensor_name: str = Field(index=True)
    sensor_location_id: Optional[uuid.UUID] = Field(
        default=None, foreign_key='sensorlocation.id', index=True
    )
