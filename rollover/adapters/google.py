import json
from pathlib import Path
from typing import Any, cast

import keyring
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build

from rollover import config
from rollover.core.errors import ConfigError

SCOPES = [
    "https://www.googleapis.com/auth/tasks",
    "https://www.googleapis.com/auth/gmail.send",
]
SERVICE_NAME = "rollover/google"
TOKEN_KEY = "token"  # noqa: S105


def _get_token() -> dict[str, Any] | None:
    token_json = keyring.get_password(SERVICE_NAME, TOKEN_KEY)
    if token_json:
        return json.loads(token_json)
    return None


def _set_token(token_dict: dict[str, Any]) -> None:
    keyring.set_password(SERVICE_NAME, TOKEN_KEY, json.dumps(token_dict))


def get_credentials(interactive: bool = False, credentials_path: Path | None = None) -> Credentials:
    """Stored OAuth credentials, refreshed when expired.

    The browser flow only runs when `interactive` is set; an unattended run
    without a usable token is a configuration error.
    """
    token_data = _get_token()
    creds = Credentials.from_authorized_user_info(token_data, SCOPES) if token_data else None

    if creds and creds.valid:
        return creds

    if creds and creds.expired and creds.refresh_token:
        creds.refresh(Request())
        _set_token(json.loads(creds.to_json()))
        return creds

    if not interactive:
        raise ConfigError("no Google token stored, run `rollover auth` first")

    credentials_path = credentials_path if credentials_path else config.CREDENTIALS_PATH
    if not credentials_path.exists():
        raise ConfigError(f"Google client credentials not found at {credentials_path}")

    flow = InstalledAppFlow.from_client_secrets_file(str(credentials_path), SCOPES)
    creds = cast(Credentials, flow.run_local_server(port=0))
    _set_token(json.loads(creds.to_json()))
    return creds


def build_service(name: str, version: str, creds: Credentials | None = None):
    creds = creds if creds else get_credentials()
    return build(name, version, credentials=creds, cache_discovery=False)
