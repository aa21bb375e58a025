"""Settings for a provisioning session, read from the environment and .env."""

import os
from dataclasses import dataclass, field

from dotenv import find_dotenv, load_dotenv

from .exceptions import ConfigurationError

DEFAULT_REGION = "us-west-2"
DEFAULT_ROLE_SESSION_NAME = "clusterlaunch"
DEFAULT_SESSION_DURATION = 3600

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class Settings:
    region: str = DEFAULT_REGION
    access_key_id: str | None = None
    secret_access_key: str | None = field(default=None, repr=False)
    assume_role_enabled: bool = False
    role_arn: str | None = None
    external_id: str | None = None
    role_session_name: str = DEFAULT_ROLE_SESSION_NAME
    session_duration_seconds: int = DEFAULT_SESSION_DURATION


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigurationError(f"{name} must be true or false, got '{value}'")


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got '{value}'") from None


def load_settings(env_file: str | None = None, region: str | None = None) -> Settings:
    """Load session settings from environment variables.

    Values from a ``.env`` file are loaded first but never override variables
    already set in the environment.

    :param env_file: Explicit .env path (default: search from the working directory)
    :param region: Region override, takes precedence over AWS_REGION
    :return: Settings for the session
    :raises ConfigurationError: If a boolean or integer variable is malformed
    """
    load_dotenv(env_file or find_dotenv(usecwd=True))

    return Settings(
        region=region or os.getenv("AWS_REGION") or DEFAULT_REGION,
        access_key_id=os.getenv("AWS_ACCESS_KEY_ID") or None,
        secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY") or None,
        assume_role_enabled=_parse_bool(
            "CLUSTERLAUNCH_ASSUME_ROLE", os.getenv("CLUSTERLAUNCH_ASSUME_ROLE", "")
        ),
        role_arn=os.getenv("CLUSTERLAUNCH_ROLE_ARN") or None,
        external_id=os.getenv("CLUSTERLAUNCH_EXTERNAL_ID") or None,
        role_session_name=os.getenv("CLUSTERLAUNCH_ROLE_SESSION_NAME")
        or DEFAULT_ROLE_SESSION_NAME,
        session_duration_seconds=_parse_int(
            "CLUSTERLAUNCH_SESSION_DURATION",
            os.getenv("CLUSTERLAUNCH_SESSION_DURATION", str(DEFAULT_SESSION_DURATION)),
        ),
    )
