"""
Shared dependencies for the application.

Repositories are built once at startup and looked up by the URL segment
naming their entity kind.
"""

from typing import Dict

from fastapi import HTTPException, status

from .repositories.record_repository import RecordRepository

# Repository instances keyed by URL segment (set by main app)
_repositories: Dict[str, RecordRepository] = {}


def set_repositories(repositories: Dict[str, RecordRepository]) -> None:
    """
    Set the repository instances served by the API.

    Called by the main app during startup.
    """
    _repositories.clear()
    _repositories.update(repositories)


def clear_repositories() -> None:
    _repositories.clear()


async def get_repository(kind: str) -> RecordRepository:
    """
    Get the repository for an entity kind.

    Raises:
        HTTPException: 503 before startup, 404 for an unknown kind
    """
    if not _repositories:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Repositories not initialized",
        )
    repository = _repositories.get(kind)
    if repository is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown record kind: {kind}",
        )
    return repository
