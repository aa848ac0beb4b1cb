"""
Secrets Cache Exception Hierarchy.

This module defines the exceptions raised by the secrets cache itself. Errors
raised by the remote client (botocore ``ClientError``/``BotoCoreError`` or any
injected client's errors) are NOT wrapped: they propagate to the caller
unchanged so callers can inspect AWS error codes directly.

Exception hierarchy:
    SecretsCacheError (base)
    ├── SecretsCacheConfigError - Invalid cache configuration
    └── SecretValueTypeError - Requested representation missing from a version

All exceptions include the secret identifier (when known) without exposing
secret values.
"""


class SecretsCacheError(Exception):
    """
    Base exception for all secrets cache errors.

    Subclasses MUST NOT include secret values in error messages.

    Attributes:
        secret_id: Name or ARN of the secret (if the error concerns one)
        message: Human-readable error message

    Example:
        >>> str(SecretsCacheError("Bad input", secret_id="prod/db/password"))
        'Bad input (secret: prod/db/password)'
    """

    def __init__(self, message: str, secret_id: str | None = None) -> None:
        super().__init__(message)
        self.secret_id = secret_id
        self.message = message

    def __str__(self) -> str:
        if self.secret_id:
            return f"{self.message} (secret: {self.secret_id})"
        return self.message


class SecretsCacheConfigError(SecretsCacheError):
    """
    Raised when the cache configuration is invalid.

    Typical causes:
    - SECRETS_CACHE_MAX_CACHE_SIZE set to 0 or a non-integer
    - SECRETS_CACHE_SECRET_REFRESH_INTERVAL negative
    - SECRETS_CACHE_DEFAULT_VERSION_STAGE set to an empty string
    """


class SecretValueTypeError(SecretsCacheError):
    """
    Raised when a secret version does not carry the requested representation.

    AWS Secrets Manager stores a version as either ``SecretString`` or
    ``SecretBinary``. Asking for the string form of a binary secret (or the
    reverse) raises this error rather than returning None, since None is
    reserved for "no such stage/version".
    """

    def __init__(self, secret_id: str, expected: str) -> None:
        super().__init__(
            message=f"Secret version has no {expected} field",
            secret_id=secret_id,
        )
        self.expected = expected


__all__ = [
    "SecretValueTypeError",
    "SecretsCacheConfigError",
    "SecretsCacheError",
]
