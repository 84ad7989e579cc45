"""
ArtCritic Backend — FastAPI Dependencies
=========================================

What:  Request-scoped dependencies shared by the route modules.
How:   FastAPI Depends(); tests replace them through app.dependency_overrides.

Identity:
    The bearer token is optional. A missing, expired or otherwise invalid
    token resolves to None, which means "analyze without saving"; it never
    causes a 401.
"""

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from artcritic.config import settings
from artcritic.services.analysis_service import AnalysisService, analysis_service
from artcritic.services.file_service import FileService, file_service
from artcritic.services.persistence_client import PersistenceClient, persistence_client

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def decode_user_identity(token: str) -> Optional[str]:
    """Return the `userId` (or `id`) claim of a valid token, else None."""
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        logger.info("Ignoring invalid bearer token: %s", str(e))
        return None

    identity = claims.get("userId") or claims.get("id")
    return str(identity) if identity else None


async def get_user_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    if credentials is None or not credentials.credentials:
        return None
    return decode_user_identity(credentials.credentials)


def get_analysis_service() -> AnalysisService:
    return analysis_service


def get_persistence_client() -> PersistenceClient:
    return persistence_client


def get_file_service() -> FileService:
    return file_service
