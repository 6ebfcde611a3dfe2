"""HTTP controllers.

Every entity gets the same five endpoints from `build_crud_router`:

- GET    /<Entity>?page=&size=&sortBy=&sortDir=
- GET    /<Entity>/{id}
- POST   /<Entity>
- PUT    /<Entity>/{id}
- DELETE /<Entity>/{id}

Controllers are thin: they delegate to a service and let the handlers in
`problems` turn raised errors into responses. Mutating endpoints are
guarded by the CSRF check and the `USER` role before the handler runs.
"""

import uuid

from fastapi import APIRouter, Depends, Response
from sqlmodel import Session

from . import schemas, services
from .auth import get_current_user, issue_csrf_token, require_user, verify_csrf
from .config import settings
from .database import get_session
from .pagination import PageRequest, page_request
from .repositories import UserRepository


def build_crud_router(prefix: str, service_class, payload_model, out_model, id_type) -> APIRouter:
    """Create the list/get/create/update/delete router for one entity."""
    router = APIRouter(prefix=f"/{prefix}", tags=[prefix])
    guarded = [Depends(verify_csrf), Depends(require_user)]

    @router.get("", response_model=schemas.PagedResult[out_model])
    def list_entities(request: PageRequest = Depends(page_request), db: Session = Depends(get_session)):
        return service_class(db).find_all(request)

    @router.get("/{id}", response_model=out_model)
    def get_entity(id: id_type, db: Session = Depends(get_session)):
        return service_class(db).find_by_id(id)

    @router.post("", response_model=out_model, status_code=201, dependencies=guarded)
    def create_entity(payload: payload_model, db: Session = Depends(get_session)):
        return service_class(db).create(payload)

    @router.put("/{id}", response_model=out_model, dependencies=guarded)
    def update_entity(id: id_type, payload: payload_model, db: Session = Depends(get_session)):
        return service_class(db).update(id, payload)

    @router.delete("/{id}", response_model=out_model, dependencies=guarded)
    def delete_entity(id: id_type, db: Session = Depends(get_session)):
        return service_class(db).delete(id)

    return router


ENTITY_ROUTERS = [
    build_crud_router("Heater", services.HeaterService, schemas.HeaterIn, schemas.HeaterOut, int),
    build_crud_router("Fruit", services.FruitService, schemas.FruitIn, schemas.FruitOut, int),
    build_crud_router("Offer", services.OfferService, schemas.OfferIn, schemas.OfferOut, int),
    build_crud_router(
        "FruitProduct", services.FruitProductService, schemas.FruitProductIn, schemas.FruitProductOut, int
    ),
    build_crud_router(
        "SensorLocation",
        services.SensorLocationService,
        schemas.SensorLocationIn,
        schemas.SensorLocationOut,
        uuid.UUID,
    ),
    build_crud_router(
        "SensorSystem", services.SensorSystemService, schemas.SensorSystemIn, schemas.SensorSystemOut, uuid.UUID
    ),
]


auth_router = APIRouter(tags=["auth"])


@auth_router.post('/auth/register', response_model=schemas.UserOut)
def register(payload: schemas.RegisterIn, db: Session = Depends(get_session)):
    """Register a new user (idempotent).

    Returns the existing user if the username is already taken so the
    call can be repeated by automation and tests.
    """
    existing = UserRepository(db).get_by_username(payload.username)
    if existing:
        return existing
    return services.AuthService(db).register(payload.username, payload.password)


@auth_router.get('/auth/me', response_model=schemas.PrincipalOut)
def me(principal: services.AuthenticatedPrincipal = Depends(get_current_user)):
    """Return the authenticated principal; the stored hash is never exposed."""
    return schemas.PrincipalOut(username=principal.username, roles=sorted(principal.roles))


@auth_router.get('/csrf', response_model=schemas.CsrfTokenOut)
def csrf_token(response: Response):
    """Issue a CSRF token as a cookie and echo it in the body."""
    token = issue_csrf_token(response)
    return schemas.CsrfTokenOut(token=token, header_name=settings.CSRF_HEADER_NAME)
