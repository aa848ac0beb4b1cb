"""
Remote client seam for the secrets cache.

The cache needs exactly two AWS Secrets Manager operations:
    - DescribeSecret: stage labels attached to each version id
    - GetSecretValue: the value payload of one version id

SecretsManagerClient captures only those two calls, so a boto3
``secretsmanager`` client satisfies it unchanged and tests can substitute a
MagicMock.

IAM Permissions Required:
    - secretsmanager:DescribeSecret
    - secretsmanager:GetSecretValue
"""

import logging
from collections.abc import Mapping
from typing import Any, Protocol

import boto3

logger = logging.getLogger(__name__)

DEFAULT_REGION = "us-east-1"


class SecretsManagerClient(Protocol):
    """The subset of the boto3 Secrets Manager client used by the cache."""

    def describe_secret(self, *, SecretId: str) -> Mapping[str, Any]:  # noqa: N803
        ...

    def get_secret_value(self, **kwargs: Any) -> Mapping[str, Any]:
        ...


def create_default_client(
    region_name: str | None = None,
    aws_access_key_id: str | None = None,
    aws_secret_access_key: str | None = None,
) -> SecretsManagerClient:
    """
    Create a boto3 Secrets Manager client.

    Args:
        region_name: AWS region. If None, boto3 resolves it from AWS_REGION /
                     AWS_DEFAULT_REGION / shared config.
        aws_access_key_id: Access key ID (optional, local testing only)
        aws_secret_access_key: Secret access key (optional, local testing only)

    Returns:
        A boto3 ``secretsmanager`` client. No remote call is made here;
        credentials are validated on the first DescribeSecret/GetSecretValue.
    """
    client_kwargs: dict[str, str] = {}
    if region_name is not None:
        client_kwargs["region_name"] = region_name

    if aws_access_key_id is not None and aws_secret_access_key is not None:
        client_kwargs["aws_access_key_id"] = aws_access_key_id
        client_kwargs["aws_secret_access_key"] = aws_secret_access_key
        auth = "access_key"
    else:
        auth = "default_chain"

    logger.info(
        "Creating AWS Secrets Manager client",
        extra={"region": region_name, "auth": auth, "backend": "aws"},
    )
    client: SecretsManagerClient = boto3.client("secretsmanager", **client_kwargs)
    return client


__all__ = ["DEFAULT_REGION", "SecretsManagerClient", "create_default_client"]
