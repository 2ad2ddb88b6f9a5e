"""Bearer token verification against Supabase Auth."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from supabase import AuthApiError, Client

_SERVER_ERROR = 500

_logger = logging.getLogger(__name__)


class IdentityVerifier(Protocol):
    """Interface for resolving an access token to a user id."""

    def resolve_user_id(self, token: str) -> UUID | None:
        """Return the user id for a valid token, otherwise None."""


@dataclass
class SupabaseIdentityVerifier(IdentityVerifier):
    """Verifies access tokens with the Supabase Auth API."""

    client: Client

    def resolve_user_id(self, token: str) -> UUID | None:
        """Return the token subject, or None when Auth rejects the token.

        Auth server errors and transport failures propagate.
        """
        try:
            response = self.client.auth.get_user(token)
        except AuthApiError as exc:
            if exc.status >= _SERVER_ERROR:
                _logger.error("Supabase Auth failed (status=%s)", exc.status)
                raise
            _logger.warning("Access token rejected: %s", exc.message)
            return None
        user = getattr(response, "user", None)
        if user is None:
            return None
        try:
            return UUID(str(user.id))
        except ValueError:
            _logger.warning("Access token subject is not a UUID: %s", user.id)
            return None
