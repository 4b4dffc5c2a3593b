"""
Secrets Manager client handle.

``SecretManagerClient`` owns one boto3 ``secretsmanager`` client. The
blocking SDK calls run on the handle's own worker pool so that awaiting an
operation does not block the event loop. Operations never raise: they
return either the converted response or a ``SecretManagerError``.
"""
import asyncio
import functools
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Mapping, Optional, TYPE_CHECKING, Union
from config import parse_connection_config
from logger_config import get_logger
from models import (
    BatchGetSecretValueRequest,
    BatchSecretValue,
    SecretDescription,
    SecretValue,
    VersionSelector,
)
from transforms import (
    batch_get_secret_value_request,
    describe_secret_request,
    get_secret_value_request,
    to_batch_secret_value,
    to_secret_description,
    to_secret_value,
)
from utils.decorators import secret_manager_operation
from utils.exceptions import ClientNotInitializedError, SecretManagerError
from .credentials import build_session

if TYPE_CHECKING:
    from mypy_boto3_secretsmanager import SecretsManagerClient as Boto3SecretsManagerClient
else:
    Boto3SecretsManagerClient = Any

logger = get_logger(__name__)

THREAD_NAME_PREFIX = 'aws-secretmanager'


async def _run_blocking(
    executor: Optional[ThreadPoolExecutor],
    func: Callable[..., Any],
    **kwargs: Any
) -> Any:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(executor, functools.partial(func, **kwargs))


class SecretManagerClient:
    """
    Caller-owned handle for one AWS Secrets Manager connection.

    Each handle runs its SDK calls on its own worker pool, created by
    ``init`` and shut down by ``close``, so a slow call on one handle never
    holds up another. Workers start on demand up to ``max_workers`` (the
    ``ThreadPoolExecutor`` default when not given) and idle workers are
    reused. boto3 clients are thread-safe, so calls are not serialized.
    """

    def __init__(self, max_workers: Optional[int] = None) -> None:
        self.max_workers = max_workers
        self._client: Optional[Boto3SecretsManagerClient] = None
        self._executor: Optional[ThreadPoolExecutor] = None

    @property
    def is_initialized(self) -> bool:
        return self._client is not None

    def init(self, settings: Mapping[str, Any]) -> Optional[SecretManagerError]:
        """
        Create the underlying client from structural settings.

        Args:
            settings: Mapping with ``region`` and optional ``auth``
                (see ``config.parse_connection_config``)

        Returns:
            None on success, or a SecretManagerError. Nothing is stored on
            failure, and an already initialized handle keeps its client.
        """
        if self._client is not None:
            return SecretManagerError(
                'Error occurred while initializing the AWS secret manager client: '
                'client is already initialized',
                operation='init'
            )

        try:
            connection_config = parse_connection_config(settings)
            session = build_session(connection_config)
            client = session.client('secretsmanager')
        except Exception as e:
            logger.error(f'Failed to initialize AWS secret manager client: {str(e)}')
            return SecretManagerError(
                f'Error occurred while initializing the AWS secret manager client: {str(e)}',
                operation='init',
                cause=e
            )

        self._attach(client)
        logger.info(
            f'Initialized AWS secret manager client for region {connection_config.region_name}'
        )
        return None

    def _attach(self, client: Boto3SecretsManagerClient) -> None:
        self._client = client
        self._executor = ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix=THREAD_NAME_PREFIX
        )

    def _require_client(self, operation: str) -> Boto3SecretsManagerClient:
        if self._client is None:
            raise ClientNotInitializedError(operation)
        return self._client

    @secret_manager_operation('describe-secret')
    async def describe_secret(self, secret_id: str) -> SecretDescription:
        """
        Retrieve the details of a secret, without its encrypted value.

        Args:
            secret_id: ARN or name of the secret

        Returns:
            SecretDescription, or a SecretManagerError on failure
        """
        client = self._require_client('describe-secret')
        request = describe_secret_request(secret_id)
        response = await _run_blocking(self._executor, client.describe_secret, **request)
        logger.info(f'Described secret {secret_id}')
        return to_secret_description(response)

    @secret_manager_operation('get-secret-value')
    async def get_secret_value(
        self,
        secret_id: str,
        version_selector: Optional[Union[VersionSelector, Mapping[str, Any]]] = None
    ) -> SecretValue:
        """
        Retrieve the decrypted value of one version of a secret.

        Args:
            secret_id: ARN or name of the secret
            version_selector: Optional version id or staging label;
                defaults to the AWSCURRENT version

        Returns:
            SecretValue, or a SecretManagerError on failure
        """
        client = self._require_client('get-secret-value')
        request = get_secret_value_request(secret_id, version_selector)
        response = await _run_blocking(self._executor, client.get_secret_value, **request)
        logger.info(f'Retrieved value of secret {secret_id}')
        return to_secret_value(response)

    @secret_manager_operation('batch-get-secret-value')
    async def batch_get_secret_value(
        self,
        request: Union[BatchGetSecretValueRequest, Mapping[str, Any]]
    ) -> BatchSecretValue:
        """
        Retrieve the decrypted values of up to 20 secrets.

        Per-secret failures are reported in ``BatchSecretValue.errors``
        rather than failing the whole call.

        Args:
            request: Secret ids and/or filters to look up

        Returns:
            BatchSecretValue, or a SecretManagerError on failure
        """
        client = self._require_client('batch-get-secret-value')
        kwargs = batch_get_secret_value_request(request)
        response = await _run_blocking(self._executor, client.batch_get_secret_value, **kwargs)
        result = to_batch_secret_value(response)
        logger.info(
            f'Batch retrieved {len(result.secret_values)} secrets with {len(result.errors)} errors'
        )
        return result

    def close(self) -> Optional[SecretManagerError]:
        """
        Release the underlying client and shut down the worker pool.

        The handle is emptied even if closing the client fails.

        Returns:
            None on success, or a SecretManagerError
        """
        client = self._client
        if client is None:
            return ClientNotInitializedError('close')
        self._client = None
        executor, self._executor = self._executor, None

        try:
            client.close()
        except Exception as e:
            logger.error(f'Failed to close AWS secret manager client: {str(e)}')
            return SecretManagerError(
                f'Error occurred while closing the AWS secret manager client: {str(e)}',
                operation='close',
                cause=e
            )
        finally:
            if executor is not None:
                executor.shutdown(wait=False)

        logger.info('Closed AWS secret manager client')
        return None

    def _close_on_exit(self) -> None:
        if self._client is None:
            return
        error = self.close()
        if error is not None:
            logger.warning(error.message)

    def __enter__(self) -> "SecretManagerClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._close_on_exit()

    async def __aenter__(self) -> "SecretManagerClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._client is not None:
            await _run_blocking(self._executor, self._close_on_exit)
