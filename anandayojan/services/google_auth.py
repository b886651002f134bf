# anandayojan/services/google_auth.py
import hashlib
import logging

from fastapi.concurrency import run_in_threadpool
from google.auth import exceptions as google_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

from ..errors import InvalidIdentityToken, UpstreamUnavailable
from ..models.auth import IdentityUser

logger = logging.getLogger(__name__)


class GoogleIdentityVerifier:
    def __init__(self, client_id: str):
        self.client_id = client_id
        self._request = google_requests.Request()

    async def verify_identity_token(self, token: str) -> IdentityUser:
        try:
            payload = await run_in_threadpool(
                id_token.verify_oauth2_token, token, self._request, self.client_id
            )
        except google_exceptions.TransportError as e:
            logger.error(f"Could not reach Google to verify token: {str(e)}")
            raise UpstreamUnavailable("google", "Identity provider unreachable") from e
        except ValueError as e:
            logger.info(f"Google token verification failed: {str(e)}")
            raise InvalidIdentityToken("Invalid Google token") from e

        return IdentityUser(
            id=payload["sub"],
            email=payload.get("email", ""),
            name=payload.get("name", ""),
            picture=payload.get("picture"),
        )


class MockIdentityVerifier:
    """Accepts ``mock:<email>[:<name>]`` tokens for local development."""

    async def verify_identity_token(self, token: str) -> IdentityUser:
        prefix, _, rest = token.partition(":")
        email, _, name = rest.partition(":")
        if prefix != "mock" or "@" not in email:
            raise InvalidIdentityToken("Invalid Google token")

        digest = hashlib.sha256(email.lower().encode("utf-8")).hexdigest()[:16]
        return IdentityUser(
            id=f"google_{digest}",
            email=email,
            name=name or email.split("@")[0],
        )
