"""Authentication helpers and FastAPI security dependencies.

Mutating routes depend on, in this order:

- `verify_csrf`: double-submit check; the `X-XSRF-TOKEN` header must
  echo the `XSRF-TOKEN` cookie handed out by `GET /csrf`;
- `require_user`: HTTP Basic credentials checked by
  `AuthService.authenticate`, then the `USER` role.

All of them run before the handler body, so a rejected request never
reaches a service. Failures raise the exceptions from `problems`, which
are rendered as 401/403 problem responses.
"""

import secrets
from typing import Optional

from fastapi import Depends, Request, Response, Security
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from sqlmodel import Session

from .config import settings
from .database import get_session
from .problems import AccessDenied, AuthenticationFailed
from .services import AuthService, AuthenticatedPrincipal

basic_scheme = HTTPBasic(auto_error=False)


def issue_csrf_token(response: Response) -> str:
    """Generate a token and set it as the CSRF cookie on `response`.

    The cookie is readable by scripts so browser clients can copy it into
    the request header.
    """
    token = secrets.token_urlsafe(32)
    response.set_cookie(settings.CSRF_COOKIE_NAME, token, httponly=False, samesite="strict")
    return token


def verify_csrf(request: Request) -> None:
    cookie = request.cookies.get(settings.CSRF_COOKIE_NAME)
    header = request.headers.get(settings.CSRF_HEADER_NAME)
    if not cookie or not header:
        raise AccessDenied("Missing CSRF token")
    if not secrets.compare_digest(cookie, header):
        raise AccessDenied("Invalid CSRF token")


def get_current_user(
    credentials: Optional[HTTPBasicCredentials] = Security(basic_scheme),
    db: Session = Depends(get_session),
) -> AuthenticatedPrincipal:
    """FastAPI dependency that returns the authenticated principal.

    Raises `AuthenticationFailed` (401) when no credentials were sent or
    they do not check out.
    """
    if credentials is None:
        raise AuthenticationFailed("Full authentication is required to access this resource")
    return AuthService(db).authenticate(credentials.username, credentials.password)


def require_role(role: str):
    """Build a dependency that also requires the principal to hold `role`."""
    def _require(principal: AuthenticatedPrincipal = Depends(get_current_user)) -> AuthenticatedPrincipal:
        if not principal.has_role(role):
            raise AccessDenied(f"Role {role} required")
        return principal
    return _require


require_user = require_role("USER")
