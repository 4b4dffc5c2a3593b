"""
Decorators for error handling, logging, and response formatting.
"""
import functools
import uuid
import traceback
from typing import Awaitable, Callable, Any, Dict, TypeVar, Union
from logger_config import get_logger
from utils.exceptions import SecretManagerError

logger = get_logger(__name__)

T = TypeVar('T')


def secret_manager_operation(
    operation: str
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[Union[T, SecretManagerError]]]]:
    """
    Decorator for client coroutines that must never raise.

    Any exception escaping the wrapped coroutine is converted into a
    ``SecretManagerError`` whose message names the operation and whose
    cause is the original exception. A ``SecretManagerError`` raised inside
    the coroutine is returned unchanged.

    Args:
        operation: Operation name used in messages (e.g. 'describe-secret')

    Returns:
        Decorator producing a coroutine that returns a result or an error
    """
    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[Union[T, SecretManagerError]]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Union[T, SecretManagerError]:
            try:
                return await func(*args, **kwargs)
            except SecretManagerError as e:
                logger.warning(f'{operation} request rejected: {e.message}')
                return e
            except Exception as e:
                logger.error(f'{operation} request failed: {str(e)}')
                return SecretManagerError(
                    f'Error occurred while executing {operation} request: {str(e)}',
                    operation=operation,
                    cause=e
                )

        return wrapper

    return decorator


def lambda_handler(
    func: Callable[[Any, Any], Any]
) -> Callable[[Any, Any], Dict[str, Any]]:
    """
    Decorator for Lambda handler functions.

    Provides:
    - Error handling with structured error responses
    - Request correlation IDs for logging
    - Response formatting

    Args:
        func: The handler function to decorate

    Returns:
        Decorated handler function
    """
    @functools.wraps(func)
    def wrapper(event: Any, context: Any) -> Dict[str, Any]:
        correlation_id = str(uuid.uuid4())

        logger.info(
            f"Handler {func.__name__} invoked",
            extra={
                "correlation_id": correlation_id,
                "handler": func.__name__,
                "request_id": getattr(context, "aws_request_id", None) if context else None
            }
        )

        try:
            result = func(event, context)

            if not isinstance(result, dict):
                result = {"data": result}

            if "metadata" not in result:
                result["metadata"] = {}
            result["metadata"]["correlation_id"] = correlation_id

            logger.info(
                f"Handler {func.__name__} completed successfully",
                extra={"correlation_id": correlation_id}
            )

            return result

        except ValueError as e:
            # Bad event shape
            error_response = {
                "error": {
                    "type": "ValidationError",
                    "message": str(e),
                    "correlation_id": correlation_id
                },
                "metadata": {
                    "correlation_id": correlation_id,
                    "handler": func.__name__
                }
            }

            logger.warning(
                f"Handler {func.__name__} validation error: {str(e)}",
                extra={"correlation_id": correlation_id}
            )

            return error_response

        except Exception as e:
            error_traceback = traceback.format_exc()

            error_response = {
                "error": {
                    "type": type(e).__name__,
                    "message": str(e),
                    "correlation_id": correlation_id
                },
                "metadata": {
                    "correlation_id": correlation_id,
                    "handler": func.__name__
                }
            }

            logger.error(
                f"Handler {func.__name__} failed: {str(e)}",
                extra={
                    "correlation_id": correlation_id,
                    "traceback": error_traceback
                },
                exc_info=True
            )

            return error_response

    return wrapper
