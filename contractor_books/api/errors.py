"""
Mapping from domain errors to HTTP errors.
"""

import logging

from fastapi import HTTPException

from contractor_books.errors import NotFoundError

logger = logging.getLogger(__name__)


def http_error(e: ValueError) -> HTTPException:
    """404 for missing rows, 400 for everything else."""
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    logger.warning("Request rejected: %s", e)
    return HTTPException(status_code=400, detail=str(e))
