"""
Credential acquisition for the build coordinator provisioner.

Sources are tried in order and the first one that yields credentials wins:
application default credentials, then a cached OAuth token file, then an
interactive authorization-code exchange that refreshes the cache.

The token cache is not locked; running two provisioners against the same
credentials directory at once is not supported.
"""

import logging
import os
from typing import Callable, List, Optional, Sequence

import google.auth
from google.auth.credentials import Credentials
from google.auth.exceptions import DefaultCredentialsError, RefreshError, TransportError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials as UserCredentials
from google_auth_oauthlib.flow import Flow

from config import (
    CLOUD_PLATFORM_SCOPE,
    COMPUTE_SCOPE,
    STORAGE_FULL_CONTROL_SCOPE,
    ProvisionConfig,
)
from errors import CredentialError

logger = logging.getLogger(__name__)

OOB_REDIRECT_URI = "urn:ietf:wg:oauth:2.0:oob"
AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
TOKEN_URI = "https://oauth2.googleapis.com/token"

# The installed-app client is also used for Cloud SQL administration.
USER_SCOPES = [
    STORAGE_FULL_CONTROL_SCOPE,
    COMPUTE_SCOPE,
    CLOUD_PLATFORM_SCOPE,
    "https://www.googleapis.com/auth/sqlservice",
    "https://www.googleapis.com/auth/sqlservice.admin",
]

TOKEN_FILE = "token.dat"
CLIENT_ID_FILE = "client-id.dat"
CLIENT_SECRET_FILE = "client-secret.dat"


class CredentialSource:
    """A way of obtaining credentials. Returns None when not applicable."""

    name = "source"

    def credentials(self) -> Optional[Credentials]:
        raise NotImplementedError


class EnvironmentDefaultSource(CredentialSource):
    """Application default credentials (service account, gcloud ADC, metadata server)."""

    name = "environment default"

    def __init__(self, scopes: Sequence[str]):
        self.scopes = list(scopes)

    def credentials(self) -> Optional[Credentials]:
        try:
            creds, _ = google.auth.default(scopes=self.scopes)
        except DefaultCredentialsError as e:
            logger.debug(f"No application default credentials: {e}")
            return None
        return creds


class CachedFileSource(CredentialSource):
    """A previously exchanged OAuth token stored as authorized-user JSON."""

    name = "cached token"

    def __init__(self, token_path: str, scopes: Sequence[str] = USER_SCOPES):
        self.token_path = token_path
        self.scopes = list(scopes)

    def credentials(self) -> Optional[Credentials]:
        if not os.path.exists(self.token_path):
            logger.info(f"No cached token at {self.token_path}")
            return None
        try:
            creds = UserCredentials.from_authorized_user_file(
                self.token_path, scopes=self.scopes
            )
        except (OSError, ValueError) as e:
            logger.warning(f"Error getting token from {self.token_path}: {e}")
            return None
        if not creds.token and not creds.refresh_token:
            logger.warning(f"Cached token in {self.token_path} has no usable token")
            return None
        if not creds.valid:
            try:
                creds.refresh(Request())
            except RefreshError as e:
                logger.warning(f"Cached token in {self.token_path} was rejected: {e}")
                return None
            except TransportError as e:
                raise CredentialError(
                    f"Error refreshing token from {self.token_path}: {e}"
                ) from e
        return creds


class InteractiveExchangeSource(CredentialSource):
    """Prompt for an authorization code and exchange it for a token.

    The exchanged token is written to ``token_path`` so later runs can use
    CachedFileSource instead.
    """

    name = "interactive exchange"

    def __init__(
        self,
        client_id_path: str,
        client_secret_path: str,
        token_path: str,
        scopes: Sequence[str] = USER_SCOPES,
        input_fn: Callable[[str], str] = input,
    ):
        self.client_id_path = client_id_path
        self.client_secret_path = client_secret_path
        self.token_path = token_path
        self.scopes = list(scopes)
        self.input_fn = input_fn

    def _read_secret(self, path: str) -> str:
        try:
            with open(path) as f:
                return f.read().strip()
        except OSError as e:
            raise CredentialError(f"Error reading {path}: {e}") from e

    def _flow(self) -> Flow:
        client_config = {
            "installed": {
                "client_id": self._read_secret(self.client_id_path),
                "client_secret": self._read_secret(self.client_secret_path),
                "auth_uri": AUTH_URI,
                "token_uri": TOKEN_URI,
                "redirect_uris": [OOB_REDIRECT_URI],
            }
        }
        return Flow.from_client_config(
            client_config, scopes=self.scopes, redirect_uri=OOB_REDIRECT_URI
        )

    def credentials(self) -> Optional[Credentials]:
        flow = self._flow()
        auth_url, _ = flow.authorization_url(prompt="consent")
        logger.info(f"Get auth code from {auth_url}")

        auth_code = self.input_fn("\nEnter auth code: ").strip()
        try:
            flow.fetch_token(code=auth_code)
        except Exception as e:
            raise CredentialError(
                f"Error exchanging auth code for a token: {e}"
            ) from e

        creds = flow.credentials
        self._write_token(creds)
        return creds

    def _write_token(self, creds: UserCredentials) -> None:
        try:
            fd = os.open(self.token_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w") as f:
                f.write(creds.to_json())
        except OSError as e:
            raise CredentialError(f"Error writing to {self.token_path}: {e}") from e
        logger.info(f"Cached token in {self.token_path}")


class CredentialProvider:
    """Picks the first credential source that yields credentials."""

    def __init__(
        self,
        config: ProvisionConfig,
        sources: Optional[List[CredentialSource]] = None,
        input_fn: Callable[[str], str] = input,
    ):
        self.config = config
        if sources is None:
            sources = self.default_sources(config, input_fn=input_fn)
        self.sources = sources

    @staticmethod
    def default_sources(
        config: ProvisionConfig, input_fn: Callable[[str], str] = input
    ) -> List[CredentialSource]:
        token_path = config.credential_path(TOKEN_FILE)
        return [
            EnvironmentDefaultSource(config.scopes),
            CachedFileSource(token_path),
            InteractiveExchangeSource(
                client_id_path=config.credential_path(CLIENT_ID_FILE),
                client_secret_path=config.credential_path(CLIENT_SECRET_FILE),
                token_path=token_path,
                input_fn=input_fn,
            ),
        ]

    def acquire(self) -> Credentials:
        """
        Return credentials from the first source that has them.

        Raises:
            CredentialError: If no source yields credentials, or a source fails
        """
        for source in self.sources:
            creds = source.credentials()
            if creds is not None:
                logger.info(f"Using credentials from {source.name}")
                return creds
        raise CredentialError(
            "No credentials available from: "
            + ", ".join(s.name for s in self.sources)
        )
