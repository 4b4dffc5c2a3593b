"""
Credential provider selection for Secrets Manager clients.
"""
import boto3
import botocore.session
from botocore.credentials import (
    ContainerProvider,
    CredentialProvider,
    CredentialResolver,
    Credentials,
    InstanceMetadataProvider,
)
from botocore.utils import InstanceMetadataFetcher
from config import (
    AuthConfig,
    ConnectionConfig,
    ContainerRole,
    SessionCredentials,
    StaticCredentials,
)
from logger_config import get_logger

logger = get_logger(__name__)

# Profile name is never read from AWS_PROFILE or AWS_DEFAULT_PROFILE
PINNED_PROFILE_VARS = {'profile': (None, None, None, None)}


class StaticCredentialProvider(CredentialProvider):
    """Provider that always hands back the same, non-refreshing credentials."""

    METHOD = 'static'
    CANONICAL_NAME = 'Static'

    def __init__(self, credentials: Credentials) -> None:
        super().__init__()
        self._credentials = credentials

    def load(self) -> Credentials:
        return self._credentials


def resolve_credential_provider(auth: AuthConfig) -> CredentialProvider:
    """
    Map an auth mode to the botocore provider that produces its credentials.

    Refresh for the container and instance profile roles is handled by
    botocore itself.

    Args:
        auth: One of the auth modes from ``config``

    Returns:
        A botocore credential provider
    """
    if isinstance(auth, SessionCredentials):
        return StaticCredentialProvider(Credentials(
            auth.access_key_id,
            auth.secret_access_key,
            auth.session_token,
            method=StaticCredentialProvider.METHOD,
        ))
    if isinstance(auth, StaticCredentials):
        return StaticCredentialProvider(Credentials(
            auth.access_key_id,
            auth.secret_access_key,
            method=StaticCredentialProvider.METHOD,
        ))
    if isinstance(auth, ContainerRole):
        return ContainerProvider()
    return InstanceMetadataProvider(
        iam_role_fetcher=InstanceMetadataFetcher(timeout=1, num_attempts=1)
    )


def build_session(connection_config: ConnectionConfig) -> boto3.session.Session:
    """
    Create a boto3 session bound to the configured region and auth mode.

    Credentials come only from the selected provider. The profile is
    pinned so AWS_PROFILE / AWS_DEFAULT_PROFILE are ignored; settings other
    than credentials may still come from the default profile of the shared
    config file when one exists.
    """
    provider = resolve_credential_provider(connection_config.auth)
    botocore_session = botocore.session.Session(session_vars=PINNED_PROFILE_VARS)
    botocore_session.register_component(
        'credential_provider', CredentialResolver(providers=[provider])
    )
    logger.debug(
        f'Using {provider.METHOD} credentials for region {connection_config.region_name}'
    )
    return boto3.session.Session(
        botocore_session=botocore_session,
        region_name=connection_config.region_name,
    )
