"""Translation of Postgres constraint failures into engine errors."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from postgrest.exceptions import APIError

from sazio.errors import ConflictError, InvalidInputError

UNIQUE_VIOLATION = "23505"
CHECK_VIOLATION = "23514"
EXCLUSION_VIOLATION = "23P01"

_logger = logging.getLogger(__name__)


@contextmanager
def translate_storage_errors(action: str, conflict_message: str) -> Iterator[None]:
    """Re-raise constraint violations from PostgREST as engine errors."""
    try:
        yield
    except APIError as exc:
        if exc.code in {UNIQUE_VIOLATION, EXCLUSION_VIOLATION}:
            _logger.info("Storage rejected %s: %s", action, exc.message)
            raise ConflictError(conflict_message) from exc
        if exc.code == CHECK_VIOLATION:
            _logger.info("Storage rejected %s: %s", action, exc.message)
            raise InvalidInputError(exc.message or "Constraint check failed") from exc
        _logger.exception("Supabase %s failed (code=%s)", action, exc.code)
        raise
