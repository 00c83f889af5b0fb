"""Organizer identity for the dashboard API.

Sessions are owned by the auth service; this API only checks the bearer JWT it
issues (``sub`` is the organizer uuid, ``name`` and ``email`` are optional
claims). Every failure is a bare 401.
"""

import logging
from uuid import UUID

import jwt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from cardulary.config.settings import settings
from cardulary.errors import UnauthorizedError

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


class CurrentOrganizer:
    def __init__(
        self, organizer_id: UUID, name: str | None = None, email: str | None = None
    ) -> None:
        self.id = organizer_id
        self.name = name
        self.email = email

    @property
    def display_name(self) -> str:
        return self.name or "The organizer"


def create_access_token(
    organizer_id: UUID, name: str | None = None, email: str | None = None
) -> str:
    payload = {"sub": str(organizer_id)}
    if name:
        payload["name"] = name
    if email:
        payload["email"] = email
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_organizer_token(token: str) -> CurrentOrganizer:
    """Return the organizer named by the token or raise UnauthorizedError."""
    if not token or not token.strip():
        raise UnauthorizedError("empty token")
    try:
        payload = jwt.decode(token.strip(), settings.secret_key, algorithms=[settings.algorithm])
    except jwt.PyJWTError as e:
        raise UnauthorizedError(str(e))

    try:
        organizer_id = UUID(str(payload.get("sub")))
    except ValueError:
        raise UnauthorizedError("sub is not a uuid")
    return CurrentOrganizer(
        organizer_id=organizer_id, name=payload.get("name"), email=payload.get("email")
    )


def get_current_organizer(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> CurrentOrganizer:
    if not credentials:
        raise HTTPException(status_code=401, detail=UnauthorizedError.public_message)
    try:
        return decode_organizer_token(credentials.credentials)
    except UnauthorizedError as e:
        logger.info(f"Rejected organizer token: {e.reason}")
        raise HTTPException(status_code=401, detail=e.message)
