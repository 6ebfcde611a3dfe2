"""Business logic services used by HTTP controllers.

This module holds small service classes that coordinate repositories
and validation. Services are intentionally thin: they validate payloads,
check that referenced rows exist and persist entities via repositories.
Failures are raised as the exceptions from `problems` and mapped to HTTP
responses by the handlers installed in `main`.
"""

import logging
from dataclasses import dataclass
from typing import FrozenSet, List

from passlib.context import CryptContext
from sqlmodel import Session

from . import models, repositories, schemas
from .pagination import PageRequest, build_page
from .problems import BadCredentials, NotFound, ReferenceConflict, UserNotFound, ValidationFailed
from .schemas import Violation
from .validation import ensure_valid

logger = logging.getLogger(__name__)

PWD_CTX = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


@dataclass(frozen=True)
class AuthenticatedPrincipal:
    """Result of a successful authentication.

    `credentials` holds the stored password hash, never the plaintext
    that was supplied.
    """
    username: str
    credentials: str
    roles: FrozenSet[str]

    def has_role(self, role: str) -> bool:
        return role.upper() in self.roles


class AuthService:
    """Authentication related operations (register + authenticate)."""
    def __init__(self, session: Session):
        self.session = session
        self.user_repo = repositories.UserRepository(session)

    def register(self, username: str, password: str, roles: str = "USER") -> models.UnconvUser:
        """Create a new user with a hashed password.

        Returns the persisted `UnconvUser` instance.
        """
        hashed = PWD_CTX.hash(password)
        u = models.UnconvUser(username=username, password=hashed, roles=roles)
        user = self.user_repo.create(u)
        logger.info("registered user %s", username)
        return user

    def authenticate(self, username: str, password: str) -> AuthenticatedPrincipal:
        """Verify credentials and return the authenticated principal.

        Raises `UserNotFound` when no user has `username` and
        `BadCredentials` when the password does not match the stored hash.
        """
        user = self.user_repo.get_by_username(username)
        if not user:
            raise UserNotFound(username)
        if not PWD_CTX.verify(password, user.password):
            raise BadCredentials()
        return AuthenticatedPrincipal(
            username=user.username,
            credentials=user.password,
            roles=frozenset(user.role_set()),
        )


class EntityService:
    """List, get, create, update and delete for one entity type.

    Subclasses set `entity_name`, `repository_class` and `out_model`, and
    override `check_references` where the entity points at other rows.
    Rows whose repository defines `is_referenced` cannot be deleted while
    something still points at them.
    """
    entity_name = None
    repository_class = None
    out_model = None

    def __init__(self, session: Session):
        self.session = session
        self.repo = self.repository_class(session)

    def present(self, entity):
        return self.out_model.model_validate(entity)

    def find_all(self, request: PageRequest) -> schemas.PagedResult:
        rows, total = self.repo.find_all(request)
        return build_page([self.present(r) for r in rows], total, request)

    def find_by_id(self, entity_id):
        return self.present(self._get_or_raise(entity_id))

    def create(self, payload):
        """Validate `payload` and persist it as a new row.

        Any identity the client sent is ignored; the store assigns one.
        """
        ensure_valid(payload)
        self.check_references(payload)
        entity = self.repo.save(self.repo.model(**payload.model_dump()))
        logger.info("created %s %s", self.entity_name, entity.id)
        return self.present(entity)

    def update(self, entity_id, payload):
        """Replace the stored fields of `entity_id` with `payload`."""
        entity = self._get_or_raise(entity_id)
        ensure_valid(payload)
        self.check_references(payload)
        for key, value in payload.model_dump().items():
            setattr(entity, key, value)
        entity = self.repo.save(entity)
        logger.info("updated %s %s", self.entity_name, entity_id)
        return self.present(entity)

    def delete(self, entity_id):
        """Delete `entity_id` and return its state from before the delete."""
        entity = self._get_or_raise(entity_id)
        self.check_not_referenced(entity)
        prior = self.present(entity)
        self.repo.delete(entity)
        logger.info("deleted %s %s", self.entity_name, entity_id)
        return prior

    def check_references(self, payload) -> None:
        pass

    def check_not_referenced(self, entity) -> None:
        is_referenced = getattr(self.repo, "is_referenced", None)
        if is_referenced is not None and is_referenced(entity.id):
            raise ReferenceConflict(self.entity_name, entity.id)

    def _get_or_raise(self, entity_id):
        entity = self.repo.get(entity_id)
        if entity is None:
            raise NotFound(self.entity_name, entity_id)
        return entity


class HeaterService(EntityService):
    entity_name = "Heater"
    repository_class = repositories.HeaterRepository
    out_model = schemas.HeaterOut


class FruitService(EntityService):
    entity_name = "Fruit"
    repository_class = repositories.FruitRepository
    out_model = schemas.FruitOut


class OfferService(EntityService):
    entity_name = "Offer"
    repository_class = repositories.OfferRepository
    out_model = schemas.OfferOut


class FruitProductService(EntityService):
    entity_name = "FruitProduct"
    repository_class = repositories.FruitProductRepository
    out_model = schemas.FruitProductOut

    def __init__(self, session: Session):
        super().__init__(session)
        self.fruits = repositories.FruitRepository(session)
        self.offers = repositories.OfferRepository(session)

    def present(self, entity):
        """Return the product with its fruit and offer loaded explicitly."""
        fruit = self.fruits.get(entity.fruit_id)
        offer = self.offers.get(entity.offer_id) if entity.offer_id is not None else None
        return schemas.FruitProductOut(
            **entity.model_dump(),
            fruit=schemas.FruitOut.model_validate(fruit) if fruit else None,
            offer=schemas.OfferOut.model_validate(offer) if offer else None,
        )

    def check_references(self, payload: schemas.FruitProductIn) -> None:
        violations: List[Violation] = []
        if not self.fruits.exists(payload.fruit_id):
            violations.append(Violation(field="fruitId", message="Fruit does not exist"))
        if payload.offer_id is not None and not self.offers.exists(payload.offer_id):
            violations.append(Violation(field="offerId", message="Offer does not exist"))
        if violations:
            raise ValidationFailed(violations)


class SensorLocationService(EntityService):
    entity_name = "SensorLocation"
    repository_class = repositories.SensorLocationRepository
    out_model = schemas.SensorLocationOut


class SensorSystemService(EntityService):
    entity_name = "SensorSystem"
    repository_class = repositories.SensorSystemRepository
    out_model = schemas.SensorSystemOut

    def __init__(self, session: Session):
        super().__init__(session)
        self.locations = repositories.SensorLocationRepository(session)

    def present(self, entity):
        location = None
        if entity.sensor_location_id is not None:
            location = self.locations.get(entity.sensor_location_id)
        return schemas.SensorSystemOut(
            **entity.model_dump(),
            sensor_location=schemas.SensorLocationOut.model_validate(location) if location else None,
        )

    def check_references(self, payload: schemas.SensorSystemIn) -> None:
        if payload.sensor_location_id is not None and not self.locations.exists(payload.sensor_location_id):
            raise ValidationFailed(
                [Violation(field="sensorLocationId", message="Sensor location does not exist")]
            )
