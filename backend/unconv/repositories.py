"""Repository classes encapsulating database operations.

Each repository is small and focused on a single table. Repositories
return SQLModel objects and commit synchronously on every write; there
is no caching or batching.
"""

from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlmodel import Session, select

from . import models
from .database import MAX_SQL_INTEGER, MIN_SQL_INTEGER
from .pagination import PageRequest, resolve_sort_column


class UserRepository:
    """CRUD operations for `UnconvUser` objects."""
    def __init__(self, session: Session):
        self.session = session

    def create(self, user: models.UnconvUser) -> models.UnconvUser:
        """Persist a new user and return the managed instance."""
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user

    def get_by_username(self, username: str) -> Optional[models.UnconvUser]:
        """Return a user by username or `None` if not found."""
        stmt = select(models.UnconvUser).where(models.UnconvUser.username == username)
        return self.session.exec(stmt).first()


class CrudRepository:
    """Find-by-id, find-all, save and delete for one table.

    Subclasses only set `model`.
    """
    model = None

    def __init__(self, session: Session):
        self.session = session

    def get(self, entity_id):
        """Return the row with `entity_id`, or `None`.

        Integer ids the database column cannot hold match no row.
        """
        if isinstance(entity_id, int) and not MIN_SQL_INTEGER <= entity_id <= MAX_SQL_INTEGER:
            return None
        return self.session.get(self.model, entity_id)

    def exists(self, entity_id) -> bool:
        return entity_id is not None and self.get(entity_id) is not None

    def count(self) -> int:
        stmt = select(func.count()).select_from(self.model)
        return self.session.exec(stmt).one()

    def find_all(self, request: PageRequest) -> Tuple[List, int]:
        """Return the rows of the requested page and the total row count.

        Rows are ordered by the requested column, then by id in the same
        direction so equal sort keys still page deterministically.
        """
        column = resolve_sort_column(self.model, request.sort_by)
        if request.offset > MAX_SQL_INTEGER:
            return [], self.count()
        order = [column.desc() if request.descending else column.asc()]
        if column is not self.model.id:
            order.append(self.model.id.desc() if request.descending else self.model.id.asc())
        stmt = select(self.model).order_by(*order).offset(request.offset).limit(request.size)
        return list(self.session.exec(stmt).all()), self.count()

    def save(self, entity):
        """Insert or update `entity` and return the refreshed instance."""
        self.session.add(entity)
        self.session.commit()
        self.session.refresh(entity)
        return entity

    def delete(self, entity) -> None:
        self.session.delete(entity)
        self.session.commit()

    def _any(self, stmt) -> bool:
        return self.session.exec(stmt.limit(1)).first() is not None


class HeaterRepository(CrudRepository):
    model = models.Heater


class FruitRepository(CrudRepository):
    model = models.Fruit

    def is_referenced(self, fruit_id: int) -> bool:
        """Return True if any fruit product points at `fruit_id`."""
        return self._any(select(models.FruitProduct.id).where(models.FruitProduct.fruit_id == fruit_id))


class OfferRepository(CrudRepository):
    model = models.Offer

    def is_referenced(self, offer_id: int) -> bool:
        return self._any(select(models.FruitProduct.id).where(models.FruitProduct.offer_id == offer_id))


class FruitProductRepository(CrudRepository):
    model = models.FruitProduct


class SensorLocationRepository(CrudRepository):
    model = models.SensorLocation

    def is_referenced(self, location_id) -> bool:
        return self._any(
            select(models.SensorSystem.id).where(models.SensorSystem.sensor_location_id == location_id)
        )


class SensorSystemRepository(CrudRepository):
    model = models.SensorSystem
