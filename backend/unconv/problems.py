"""Error taxonomy and problem-details formatting.

Services raise the exceptions defined here; `install_problem_handlers`
registers FastAPI exception handlers that turn them into HTTP responses.
Client errors are rendered as `application/problem+json` bodies, except
`NotFound` which is a bare 404 with an empty body.
"""

import logging
from http import HTTPStatus
from typing import Iterable, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from .schemas import Problem, Violation

logger = logging.getLogger(__name__)

CONSTRAINT_VIOLATION_TYPE = "https://zalando.github.io/problem/constraint-violation"
CONSTRAINT_VIOLATION_TITLE = "Constraint Violation"
DEFAULT_PROBLEM_TYPE = "about:blank"
PROBLEM_MEDIA_TYPE = "application/problem+json"


class UnconvException(Exception):
    """Base exception for all request-level failures."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ValidationFailed(UnconvException):
    """One or more field constraints were violated."""

    def __init__(self, violations: Iterable[Violation]):
        self.violations = list(violations)
        fields = ", ".join(v.field for v in self.violations)
        super().__init__(f"constraint violation on: {fields}")


class NotFound(UnconvException):
    """The referenced identity does not exist."""

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found: {entity_id}")


class AuthenticationFailed(UnconvException):
    """Base for credential failures; all of them surface as the same 401."""


class UserNotFound(AuthenticationFailed):
    def __init__(self, username: str):
        self.username = username
        super().__init__("Username not found")


class BadCredentials(AuthenticationFailed):
    def __init__(self):
        super().__init__("You provided an incorrect password.")


class AccessDenied(UnconvException):
    """Authenticated or not, the request may not proceed (403)."""


class ReferenceConflict(UnconvException):
    """A row cannot be deleted while other rows still point at it."""

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} is still referenced")


class ProblemResponse(JSONResponse):
    media_type = PROBLEM_MEDIA_TYPE


def problem_response(
    status: int,
    detail: Optional[str] = None,
    violations: Optional[List[Violation]] = None,
    headers: Optional[dict] = None,
) -> ProblemResponse:
    """Build a problem-details response.

    A non-empty `violations` list makes it a constraint violation problem
    (fixed type URI and title); otherwise the title is the HTTP reason
    phrase for `status`.
    """
    if violations is not None:
        problem = Problem(
            type=CONSTRAINT_VIOLATION_TYPE,
            title=CONSTRAINT_VIOLATION_TITLE,
            status=status,
            detail=detail,
            violations=violations,
        )
    else:
        problem = Problem(
            type=DEFAULT_PROBLEM_TYPE,
            title=HTTPStatus(status).phrase,
            status=status,
            detail=detail,
        )
    return ProblemResponse(
        status_code=status,
        content=problem.model_dump(exclude_none=True),
        headers=headers,
    )


def violations_from_request_errors(errors) -> List[Violation]:
    """Map FastAPI/pydantic request errors to `Violation`s.

    The first element of `loc` names the request part (body, query, path)
    and is dropped unless nothing else is left.
    """
    out = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ())]
        field = ".".join(loc[1:]) if len(loc) > 1 else ".".join(loc)
        out.append(Violation(field=field, message=err.get("msg", "invalid value")))
    return out


async def _validation_failed_handler(request: Request, exc: ValidationFailed):
    logger.info("validation failed %s %s: %s", request.method, request.url.path, exc.message)
    return problem_response(400, violations=exc.violations)


async def _request_validation_handler(request: Request, exc: RequestValidationError):
    violations = violations_from_request_errors(exc.errors())
    logger.info(
        "request rejected %s %s: %s",
        request.method,
        request.url.path,
        ", ".join(v.field for v in violations),
    )
    return problem_response(400, violations=violations)


async def _not_found_handler(request: Request, exc: NotFound):
    logger.info("%s %s: %s", request.method, request.url.path, exc.message)
    return Response(status_code=404)


async def _authentication_failed_handler(request: Request, exc: AuthenticationFailed):
    # which part failed stays in the log, never in the response
    logger.warning("authentication failed %s %s: %s", request.method, request.url.path, exc.message)
    return problem_response(
        401,
        detail="Bad credentials",
        headers={"WWW-Authenticate": 'Basic realm="unconv"'},
    )


async def _access_denied_handler(request: Request, exc: AccessDenied):
    logger.warning("access denied %s %s: %s", request.method, request.url.path, exc.message)
    return problem_response(403, detail=exc.message)


async def _reference_conflict_handler(request: Request, exc: ReferenceConflict):
    logger.info("%s %s: %s", request.method, request.url.path, exc.message)
    return problem_response(409, detail=exc.message)


def install_problem_handlers(app: FastAPI) -> None:
    """Register the exception handlers for every error in this module."""
    app.add_exception_handler(ValidationFailed, _validation_failed_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(NotFound, _not_found_handler)
    app.add_exception_handler(AuthenticationFailed, _authentication_failed_handler)
    app.add_exception_handler(AccessDenied, _access_denied_handler)
    app.add_exception_handler(ReferenceConflict, _reference_conflict_handler)
