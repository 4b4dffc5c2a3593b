"""
Custom exception classes for the Secrets Manager client and handlers.
"""
from typing import Optional, Any


class SecretManagerError(Exception):
    """Error returned by client operations when the SDK call or setup fails."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        cause: Optional[BaseException] = None
    ):
        """
        Initialize Secrets Manager error.

        Args:
            message: Error message
            operation: Operation name if available (e.g. 'describe-secret')
            cause: Underlying exception if available
        """
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.cause = cause
        self.__cause__ = cause


class ClientNotInitializedError(SecretManagerError):
    """Error returned when an operation runs on a handle without a client."""

    def __init__(self, operation: Optional[str] = None):
        message = 'AWS secret manager client is not initialized'
        if operation:
            message = f'{message}: cannot execute {operation} request'
        super().__init__(message, operation=operation)


class ConfigurationError(Exception):
    """Exception raised for invalid client configuration."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Any = None
    ):
        """
        Initialize configuration error.

        Args:
            message: Error message
            field: Configuration key that failed validation if available
            value: Invalid value if available
        """
        super().__init__(message)
        self.message = message
        self.field = field
        self.value = value
