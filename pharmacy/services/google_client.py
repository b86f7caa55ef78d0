# pharmacy/services/google_client.py
from dataclasses import dataclass

from google.auth import exceptions as google_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

from pharmacy.domain.errors import ServiceUnavailableError
from pharmacy.utils.retry import google_retry
from pharmacy.utils.settings import GOOGLE_CLIENT_ID
from pharmacy.utils.logging import get_logger

logger = get_logger(__name__)

_GOOGLE_ISSUERS = ("accounts.google.com", "https://accounts.google.com")


@dataclass
class GoogleIdentity:
    sub: str
    email: str
    email_verified: bool = False
    name: str | None = None
    given_name: str | None = None
    family_name: str | None = None
    picture: str | None = None


class GoogleIdentityClient:
    """
    Weryfikuje Google ID token lokalnie (podpis, wystawca, audience).
    Z sieci pobierane sa tylko publiczne certyfikaty Google.
    """

    def __init__(self, client_id: str | None = None, request: google_requests.Request | None = None):
        self.client_id = client_id if client_id is not None else GOOGLE_CLIENT_ID
        self.request = request or google_requests.Request()

    @google_retry()
    def _decode(self, token: str) -> dict:
        # bez skonfigurowanego client id audience nie jest sprawdzane
        return id_token.verify_oauth2_token(token, self.request, audience=self.client_id or None)

    def verify(self, token: str) -> GoogleIdentity | None:
        try:
            claims = self._decode(token)
        except google_exceptions.TransportError as e:
            logger.error(f"Certyfikaty Google niedostepne: {e}")
            raise ServiceUnavailableError("Weryfikacja Google jest chwilowo niedostępna")
        except (ValueError, google_exceptions.GoogleAuthError) as e:
            logger.warning(f"Google odrzucil token: {e}")
            return None

        if claims.get("iss") not in _GOOGLE_ISSUERS:
            logger.warning(f"Nieoczekiwany wystawca tokenu: {claims.get('iss')}")
            return None

        if not claims.get("sub") or not claims.get("email"):
            return None

        return GoogleIdentity(
            sub=claims["sub"],
            email=claims["email"],
            email_verified=str(claims.get("email_verified", "false")).lower() == "true",
            name=claims.get("name"),
            given_name=claims.get("given_name"),
            family_name=claims.get("family_name"),
            picture=claims.get("picture"),
        )


def get_google_client() -> GoogleIdentityClient:
    return GoogleIdentityClient()
