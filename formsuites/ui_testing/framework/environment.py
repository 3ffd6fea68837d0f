"""
================================================================================
Environment & User Sessions
================================================================================

Authenticated browsing sessions for the site under test.

Each configured user logs in through the site's auth service (JSON POST of
``UserName``/``UserPassword``); the cookies received are injected into the
browser context before any navigation.

Environment file (YAML or JSON):

    BaseUrl: https://site.example.com
    AuthUrl: https://site.example.com/ServiceModel/AuthService.svc/Login   # optional
    Users:
      - Username: Supervisor
        Password: "********"

Optional site file:

    AuthPath: /ServiceModel/AuthService.svc/Login

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import httpx
import yaml
from loguru import logger

from .errors import AuthenticationError, ConfigurationError


DEFAULT_AUTH_PATH = "/ServiceModel/AuthService.svc/Login"
DEFAULT_LOGIN_TIMEOUT = 60.0


@dataclass(frozen=True)
class UserCredentials:
    username: str
    password: str


def build_default_auth_url(base_url: str) -> str:
    if not base_url or not base_url.strip():
        raise ConfigurationError("BaseUrl must be provided to build default AuthUrl.")
    return base_url.rstrip("/") + DEFAULT_AUTH_PATH


def normalize_relative_path(path: str) -> str:
    trimmed = path.strip()
    return trimmed if trimmed.startswith("/") else "/" + trimmed


class UserSession:
    """
    Logged-in user: credentials, HTTP client and session cookies.

    The login happens on construction so ``cookies`` is ready to use.
    """

    def __init__(
        self,
        base_url: str,
        auth_url: Optional[str],
        username: str,
        password: str,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        if not base_url or not base_url.strip():
            raise ConfigurationError("BaseUrl must be provided.")
        if not username or not username.strip():
            raise ConfigurationError("Username must be provided.")
        if not password or not password.strip():
            raise ConfigurationError("Password must be provided.")

        self.base_url = base_url.rstrip("/")
        self.auth_url = auth_url if auth_url and auth_url.strip() else build_default_auth_url(self.base_url)
        self.username = username
        self.password = password
        self.cookies: Dict[str, str] = {}

        self.client = httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(DEFAULT_LOGIN_TIMEOUT),
            transport=transport,
        )

        try:
            self.refresh_session()
        except AuthenticationError:
            self.client.close()
            raise

    def __repr__(self) -> str:
        return f"UserSession(username={self.username!r}, base_url={self.base_url!r})"

    def refresh_session(self) -> None:
        """Log in again and replace the stored cookies."""
        payload = {"UserName": self.username, "UserPassword": self.password}
        logger.debug(f"Logging in user '{self.username}' via {self.auth_url}")

        try:
            response = self.client.post(self.auth_url, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise AuthenticationError(f"Login failed for user '{self.username}': {e}") from e

        self.cookies = {cookie.name: cookie.value for cookie in self.client.cookies.jar}
        if not self.cookies:
            raise AuthenticationError(
                f"No cookies were received after login for user '{self.username}'."
            )

        logger.info(f"User '{self.username}' logged in ({len(self.cookies)} cookies)")

    def close(self) -> None:
        self.client.close()


class Environment:
    """
    Site under test plus its logged-in users.

    Usage:
        env = Environment.from_file("config/env.yaml")
        session = env.default_user()
        ...
        env.close()
    """

    def __init__(
        self,
        base_url: str,
        users: Iterable[UserCredentials],
        auth_url: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        if not base_url or not base_url.strip():
            raise ConfigurationError("BaseUrl must be provided.")
        if users is None:
            raise ConfigurationError("Users must be provided.")

        self.base_url = base_url.rstrip("/")
        self.auth_url = auth_url if auth_url and auth_url.strip() else build_default_auth_url(self.base_url)

        # Usernames are matched case-insensitively
        self._users: Dict[str, UserSession] = {}
        try:
            for credentials in users:
                if credentials is None:
                    continue
                session = UserSession(
                    self.base_url,
                    self.auth_url,
                    credentials.username,
                    credentials.password,
                    transport=transport,
                )
                self._users[session.username.lower()] = session
        except (AuthenticationError, ConfigurationError):
            self.close()
            raise

        if not self._users:
            raise ConfigurationError("Environment must have at least one user.")

    @property
    def users(self) -> List[UserSession]:
        return list(self._users.values())

    def get_user(self, username: str) -> UserSession:
        if not username or not username.strip():
            raise ValueError("Username must be provided.")
        try:
            return self._users[username.lower()]
        except KeyError:
            raise KeyError(f"User '{username}' is not registered in this environment.") from None

    def default_user(self) -> UserSession:
        """First configured user."""
        return next(iter(self._users.values()))

    def refresh_user_session(self, username: str) -> None:
        self.get_user(username).refresh_session()

    def close(self) -> None:
        for session in self._users.values():
            session.close()

    def __enter__(self) -> "Environment":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # =========================================================================
    # File loading
    # =========================================================================

    @classmethod
    def from_file(
        cls,
        env_path: Union[str, Path],
        site_path: Optional[Union[str, Path]] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "Environment":
        """
        Build an environment from an environment file and an optional site file.

        The site file's ``AuthPath`` (joined to ``BaseUrl``) takes precedence
        over ``AuthUrl`` from the environment file.
        """
        env = _read_document(env_path, "Environment")
        base_url = _required_str(env, "BaseUrl", "Environment")
        auth_url = _optional_str(env, "AuthUrl")

        if site_path is not None:
            site = _read_document(site_path, "Site")
            auth_path = normalize_relative_path(_required_str(site, "AuthPath", "Site"))
            auth_url = base_url.rstrip("/") + auth_path

        return cls(base_url, _parse_users(env), auth_url=auth_url, transport=transport)


def _read_document(path: Union[str, Path], kind: str) -> Dict[str, Any]:
    file_path = Path(path)
    if not file_path.exists():
        raise ConfigurationError(f"{kind} config file not found at path '{file_path}'.")

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse {kind.lower()} config '{file_path}': {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"{kind} config '{file_path}' must contain a mapping.")
    return {str(k).lower(): v for k, v in data.items()}


def _required_str(node: Dict[str, Any], key: str, kind: str) -> str:
    value = node.get(key.lower())
    if value is None:
        raise ConfigurationError(f"{kind} configuration is missing required property '{key}'.")
    if not str(value).strip():
        raise ConfigurationError(f"{kind} configuration property '{key}' must be a non-empty string.")
    return str(value)


def _optional_str(node: Dict[str, Any], key: str) -> Optional[str]:
    value = node.get(key.lower())
    if value is None or not str(value).strip():
        return None
    return str(value)


def _parse_users(env: Dict[str, Any]) -> List[UserCredentials]:
    raw_users = env.get("users")
    if not isinstance(raw_users, list):
        raise ConfigurationError("Environment configuration must contain 'Users' list with user objects.")

    users = []
    for item in raw_users:
        if not isinstance(item, dict):
            continue
        node = {str(k).lower(): v for k, v in item.items()}
        users.append(UserCredentials(
            username=_required_str(node, "Username", "Environment"),
            password=_required_str(node, "Password", "Environment"),
        ))

    if not users:
        raise ConfigurationError("Environment configuration 'Users' list must contain at least one user.")
    return users


__all__ = [
    "DEFAULT_AUTH_PATH",
    "Environment",
    "UserCredentials",
    "UserSession",
    "build_default_auth_url",
]
