"""
Shared-secret request authentication.

The front-end sends the secret in either header:

    X-PT-Auth: <token>
    Authorization: Bearer <token>

X-PT-Auth is checked first. A "Bearer " prefix is accepted on either header.
When no secret is configured, authentication is disabled entirely.
"""

import logging
import secrets
from dataclasses import dataclass
from typing import Optional

from ..errors import AuthInvalidError, AuthMissingError

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


def extract_token(
    x_pt_auth: Optional[str],
    authorization: Optional[str],
) -> Optional[str]:
    """Pick the first non-empty auth header and strip any Bearer prefix."""
    header = x_pt_auth or authorization
    if not header:
        return None
    if header.lower().startswith(BEARER_PREFIX):
        header = header[len(BEARER_PREFIX):].strip()
    return header


@dataclass(frozen=True)
class Authenticator:
    """Token comparison against a static secret. None disables auth."""
    secret: Optional[str] = None

    @property
    def enabled(self) -> bool:
        return bool(self.secret)

    def check(
        self,
        x_pt_auth: Optional[str] = None,
        authorization: Optional[str] = None,
    ) -> None:
        """
        Allow the request or raise.

        Raises:
            AuthMissingError: secret configured, no header present (401)
            AuthInvalidError: header present but token mismatched (403)
        """
        if not self.enabled:
            return

        if not (x_pt_auth or authorization):
            logger.warning("Request missing auth header")
            raise AuthMissingError()

        token = extract_token(x_pt_auth, authorization) or ""
        if not secrets.compare_digest(token.encode(), self.secret.encode()):
            logger.warning("Invalid auth token attempt")
            raise AuthInvalidError()
