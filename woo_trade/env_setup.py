"""Environment configuration setup utilities.

This module provides functions for loading credentials and endpoints from .env
files or the process environment.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import quote, urlsplit, urlunsplit

from dotenv import load_dotenv

from woo_trade.errors import ValidationError
from woo_trade.helpers import api_url_for
from woo_trade.types import Environment

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnvironmentConfig:
    """Endpoints and credentials of one environment."""

    environment: Environment
    api_url: str
    api_key: str | None
    api_secret: str | None = field(default=None, repr=False)
    proxy_url: str | None = field(default=None, repr=False)


def _suffix(environment: Environment) -> str:
    # production variables carry no suffix
    return "" if environment is Environment.PRODUCTION else f"_{environment.name}"


def proxy_with_credentials(
    proxy_url: str, username: str | None, password: str | None
) -> str:
    """Embed basic-auth credentials into a proxy URL.

    Raises:
        ValidationError: If the proxy URL has no scheme or host.

    """
    parts = urlsplit(proxy_url)
    if not parts.scheme or not parts.hostname:
        raise ValidationError(f"Invalid proxy URL {proxy_url!r}")
    if not username:
        return proxy_url

    userinfo = quote(username, safe="")
    if password:
        userinfo += f":{quote(password, safe='')}"
    # host and port as written, brackets of IPv6 literals included
    host = parts.netloc.rpartition("@")[2]
    netloc = f"{userinfo}@{host}"
    return urlunsplit(parts._replace(netloc=netloc))


def setup_environment(env_file: str | Path = ".env") -> EnvironmentConfig:
    """Load the API configuration for the selected environment.

    Loads environment variables from a .env file if present, otherwise falls
    back to system environment variables. ``ENVIRONMENT`` selects production
    (the default) or staging; staging variables carry a ``_STAGING`` suffix.

    Variables:
        - ``WOO_API_KEY[_STAGING]``, ``WOO_API_SECRET[_STAGING]``
        - ``WOO_API_URL[_STAGING]`` (optional base URL override)
        - ``PROXY_URL``, ``PROXY_USERNAME``, ``PROXY_PASSWORD`` (optional)

    Returns:
        EnvironmentConfig for the selected environment

    Raises:
        ValidationError: If ENVIRONMENT or PROXY_URL is invalid

    """
    env_file_path = Path(env_file)
    if env_file_path.exists():
        log.info("Loading environment variables from %s", env_file_path)
        load_dotenv(env_file_path)
    else:
        log.info("%s not found. Falling back to process environment variables.", env_file_path)

    name = os.getenv("ENVIRONMENT", Environment.PRODUCTION.value).lower()
    try:
        environment = Environment(name)
    except ValueError as e:
        raise ValidationError(f"Unknown ENVIRONMENT {name!r}") from e
    log.info("Using %s environment", environment.value)

    suffix = _suffix(environment)
    api_url = os.environ.get(f"WOO_API_URL{suffix}") or api_url_for(environment)
    api_key = os.environ.get(f"WOO_API_KEY{suffix}")
    api_secret = os.environ.get(f"WOO_API_SECRET{suffix}")
    if api_key is None or api_secret is None:
        log.warning("WOO_API_KEY%s or WOO_API_SECRET%s is not set", suffix, suffix)

    proxy_url = os.environ.get("PROXY_URL")
    if proxy_url:
        proxy_url = proxy_with_credentials(
            proxy_url,
            os.environ.get("PROXY_USERNAME"),
            os.environ.get("PROXY_PASSWORD"),
        )

    return EnvironmentConfig(
        environment=environment,
        api_url=api_url,
        api_key=api_key,
        api_secret=api_secret,
        proxy_url=proxy_url or None,
    )
