"""
Configuration module for the Secrets Manager adaptor.

Two layers live here:

- ``parse_connection_config`` decodes the structural settings a caller
  hands to ``SecretManagerClient.init`` into an immutable
  ``ConnectionConfig`` (region + auth mode).
- ``Config`` reads the environment used by the Lambda entry points and
  renders those same structural settings.
"""
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union
from logger_config import get_logger
from utils.exceptions import ConfigurationError

logger = get_logger(__name__)

ECS_CONTAINER_ROLE = 'ECS_CONTAINER_ROLE'
EC2_IAM_ROLE = 'EC2_IAM_ROLE'


class GlobalRegion(str, Enum):
    """Partition-wide region identifiers with a canonical constant."""

    AWS_GLOBAL = 'aws-global'
    AWS_CN_GLOBAL = 'aws-cn-global'
    AWS_US_GOV_GLOBAL = 'aws-us-gov-global'
    AWS_ISO_GLOBAL = 'aws-iso-global'
    AWS_ISO_B_GLOBAL = 'aws-iso-b-global'


@dataclass(frozen=True)
class StaticCredentials:
    """Long-lived access key pair."""

    access_key_id: str
    secret_access_key: str


@dataclass(frozen=True)
class SessionCredentials:
    """Temporary access key pair with its session token."""

    access_key_id: str
    secret_access_key: str
    session_token: str


@dataclass(frozen=True)
class ContainerRole:
    """Credentials from the ECS container credentials endpoint."""


@dataclass(frozen=True)
class InstanceProfileRole:
    """Credentials from the EC2 instance metadata service."""


AuthConfig = Union[StaticCredentials, SessionCredentials, ContainerRole, InstanceProfileRole]
Region = Union[GlobalRegion, str]


@dataclass(frozen=True)
class ConnectionConfig:
    """Validated connection settings for one client instance."""

    region: Region
    auth: AuthConfig

    @property
    def region_name(self) -> str:
        """Region id as a plain string, as boto3 expects it."""
        if isinstance(self.region, GlobalRegion):
            return self.region.value
        return self.region


def _lookup(mapping: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if mapping.get(key) is not None:
            return mapping[key]
    return None


def _require_string(value: Any, field: str) -> None:
    if value is None or value == '':
        raise ConfigurationError(f'{field} is required for static credentials', field=field)
    if not isinstance(value, str):
        raise ConfigurationError(
            f'{field} must be a string', field=field, value=type(value).__name__
        )


def parse_region(region: Any) -> Region:
    """
    Resolve a region string.

    Global identifiers map to their ``GlobalRegion`` constant; any other
    string is passed through unchanged and left to the SDK to reject.

    Raises:
        ConfigurationError: If region is missing or not a string
    """
    if not isinstance(region, str) or not region:
        raise ConfigurationError(
            'region must be a non-empty string', field='region', value=region
        )
    for global_region in GlobalRegion:
        if global_region.value == region:
            return global_region
    return region


def parse_auth(auth: Any) -> AuthConfig:
    """
    Resolve the auth setting into one of the four auth modes.

    A mapping is read as static keys, with ``session_token`` selecting
    session credentials. The ``ECS_CONTAINER_ROLE`` tag selects the container
    role. Anything else falls back to the instance profile role.

    Raises:
        ConfigurationError: If a static credentials mapping lacks a key or
            holds a non-string value
    """
    if isinstance(auth, Mapping):
        access_key_id = _lookup(auth, 'access_key_id', 'accessKeyId')
        secret_access_key = _lookup(auth, 'secret_access_key', 'secretAccessKey')
        session_token = _lookup(auth, 'session_token', 'sessionToken')

        _require_string(access_key_id, 'auth.access_key_id')
        _require_string(secret_access_key, 'auth.secret_access_key')
        if session_token is not None and not isinstance(session_token, str):
            raise ConfigurationError(
                'auth.session_token must be a string',
                field='auth.session_token',
                value=type(session_token).__name__
            )

        if session_token is not None:
            return SessionCredentials(access_key_id, secret_access_key, session_token)
        return StaticCredentials(access_key_id, secret_access_key)

    if auth == ECS_CONTAINER_ROLE:
        return ContainerRole()

    if auth is not None and auth != EC2_IAM_ROLE:
        logger.warning(
            f'Unrecognized auth setting {auth!r}, falling back to EC2 instance profile role'
        )
    return InstanceProfileRole()


def parse_connection_config(settings: Mapping[str, Any]) -> ConnectionConfig:
    """
    Build a ConnectionConfig from structural settings.

    Args:
        settings: Mapping with a required ``region`` string and an optional
            ``auth`` value (credentials mapping or auth tag string)

    Returns:
        ConnectionConfig: The validated connection settings

    Raises:
        ConfigurationError: If settings are malformed
    """
    if not isinstance(settings, Mapping):
        raise ConfigurationError(
            'client configuration must be a mapping', value=type(settings).__name__
        )
    return ConnectionConfig(
        region=parse_region(settings.get('region')),
        auth=parse_auth(settings.get('auth')),
    )


@dataclass
class Config:
    """Type-safe configuration object with validated environment variables."""

    aws_region: str = "us-east-1"
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    session_token: Optional[str] = None
    auth_type: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        """
        Create Config instance from environment variables.

        Raises:
            ConfigurationError: If environment variables are inconsistent or invalid.
        """
        aws_region = (
            os.environ.get("SECRETS_MANAGER_REGION")
            or os.environ.get("AWS_REGION", "us-east-1")
        )

        access_key_id = os.environ.get("SECRETS_MANAGER_ACCESS_KEY_ID")
        secret_access_key = os.environ.get("SECRETS_MANAGER_SECRET_ACCESS_KEY")
        session_token = os.environ.get("SECRETS_MANAGER_SESSION_TOKEN")
        if bool(access_key_id) != bool(secret_access_key):
            raise ConfigurationError(
                "SECRETS_MANAGER_ACCESS_KEY_ID and SECRETS_MANAGER_SECRET_ACCESS_KEY "
                "must be set together",
                field="SECRETS_MANAGER_ACCESS_KEY_ID"
            )

        auth_type = os.environ.get("SECRETS_MANAGER_AUTH")
        log_level = os.environ.get("LOG_LEVEL", "INFO").upper()

        valid_log_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if log_level not in valid_log_levels:
            raise ConfigurationError(
                f"LOG_LEVEL must be one of {valid_log_levels}, got: {log_level}",
                field="LOG_LEVEL",
                value=log_level
            )

        return cls(
            aws_region=aws_region,
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            session_token=session_token,
            auth_type=auth_type,
            log_level=log_level,
        )

    def to_connection_settings(self) -> Dict[str, Any]:
        """Render the structural settings accepted by ``parse_connection_config``."""
        if self.access_key_id:
            auth: Any = {
                'access_key_id': self.access_key_id,
                'secret_access_key': self.secret_access_key,
            }
            if self.session_token:
                auth['session_token'] = self.session_token
        else:
            auth = self.auth_type
        return {'region': self.aws_region, 'auth': auth}


_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the global configuration instance.

    Returns:
        Config: The validated configuration object

    Raises:
        ConfigurationError: If environment variables are invalid.
    """
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config
