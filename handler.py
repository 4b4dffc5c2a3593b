"""
Lambda handler functions exposing Secrets Manager lookups.

Each handler reuses one module-level client configured from the
environment (see ``config.Config``) and returns JSON-safe dicts.
"""
import asyncio
from typing import Any, Dict, Optional
from config import get_config
from logger_config import get_logger
from models import BatchGetSecretValueRequest, VersionSelector
from services.secrets_manager_service import SecretManagerClient
from transforms import to_json_dict
from utils.decorators import lambda_handler
from utils.exceptions import SecretManagerError

logger = get_logger(__name__)

_secrets_client: Optional[SecretManagerClient] = None


def get_secrets_client() -> SecretManagerClient:
    """
    Return the shared client, initializing it on first use.

    Raises:
        SecretManagerError: If the client cannot be initialized
    """
    global _secrets_client
    if _secrets_client is None:
        client = SecretManagerClient()
        error = client.init(get_config().to_connection_settings())
        if error is not None:
            raise error
        _secrets_client = client
    return _secrets_client


def _require(event: Dict[str, Any], key: str) -> Any:
    value = event.get(key)
    if not value:
        raise ValueError(f"Event field '{key}' is required")
    return value


def _to_response(result: Any) -> Dict[str, Any]:
    if isinstance(result, SecretManagerError):
        raise result
    return to_json_dict(result)


@lambda_handler
def describe_secret(event, context):
    """Describe the secret named by event['secret_id']."""
    secret_id = _require(event, 'secret_id')
    client = get_secrets_client()
    return _to_response(asyncio.run(client.describe_secret(secret_id)))


@lambda_handler
def get_secret_value(event, context):
    """
    Fetch a secret value.

    The event carries ``secret_id`` and optionally ``version_id`` or
    ``version_stage``.
    """
    secret_id = _require(event, 'secret_id')
    version_selector = VersionSelector.from_dict(event)
    client = get_secrets_client()
    return _to_response(
        asyncio.run(client.get_secret_value(secret_id, version_selector))
    )


@lambda_handler
def batch_get_secret_value(event, context):
    """
    Fetch several secret values in one call.

    The event carries ``secret_ids`` and/or ``filters`` (a list of
    ``{"key": ..., "values": [...]}``), plus optional ``max_results`` and
    ``next_token`` for paging.
    """
    if not event.get('secret_ids') and not event.get('filters'):
        raise ValueError("Event field 'secret_ids' or 'filters' is required")
    request = BatchGetSecretValueRequest.from_dict(event)
    client = get_secrets_client()
    result = asyncio.run(client.batch_get_secret_value(request))
    if not isinstance(result, SecretManagerError) and result.errors:
        logger.warning(f'{len(result.errors)} secrets could not be retrieved')
    return _to_response(result)
