"""AWS ECR credential exchange."""

from __future__ import annotations

import base64
import binascii
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from imagecheck.models.source import Source
from imagecheck.utils.errors import AuthenticationFailedError
from imagecheck.utils.logging import get_logger

logger = get_logger("auth.ecr")


class ECRCredentialExchange:
    """Trades AWS keys for temporary ECR registry credentials.

    Optionally assumes a role first, and can restrict the token to a
    single registry id.

    Example:
        exchange = ECRCredentialExchange(role_arn="arn:aws:iam::123:role/ci")
        username, password = exchange.authenticate(key_id, secret, "us-east-1")
    """

    ROLE_SESSION_NAME = "image-check"

    def __init__(
        self,
        session_token: str = "",
        role_arn: str = "",
        account_id: str = "",
    ) -> None:
        """Initialize the exchange.

        Args:
            session_token: AWS session token for temporary keys
            role_arn: Role to assume before requesting the token
            account_id: Registry id to request a token for
        """
        self.session_token = session_token
        self.role_arn = role_arn
        self.account_id = account_id

    @classmethod
    def from_source(cls, source: Source) -> "ECRCredentialExchange":
        """Create an exchange from the AWS settings of a source."""
        return cls(
            session_token=source.aws_session_token,
            role_arn=source.aws_role_arn,
            account_id=source.aws_account_id,
        )

    def _session(self, access_key_id: str, secret_key: str, region: str) -> Any:
        session = boto3.Session(
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_key,
            aws_session_token=self.session_token or None,
            region_name=region,
        )
        if not self.role_arn:
            return session

        logger.debug("Assuming role %s", self.role_arn)
        sts = session.client("sts", region_name=region)
        credentials = sts.assume_role(
            RoleArn=self.role_arn,
            RoleSessionName=self.ROLE_SESSION_NAME,
        )["Credentials"]
        return boto3.Session(
            aws_access_key_id=credentials["AccessKeyId"],
            aws_secret_access_key=credentials["SecretAccessKey"],
            aws_session_token=credentials["SessionToken"],
            region_name=region,
        )

    def authenticate(self, access_key_id: str, secret_key: str, region: str) -> tuple[str, str]:
        """Exchange AWS keys for an ECR username and password.

        Raises:
            AuthenticationFailedError: If AWS rejects the request or the
                token cannot be decoded
        """
        try:
            session = self._session(access_key_id, secret_key, region)
            client = session.client("ecr", region_name=region)

            kwargs: dict[str, Any] = {}
            if self.account_id:
                kwargs["registryIds"] = [self.account_id]
            response = client.get_authorization_token(**kwargs)
        except (BotoCoreError, ClientError) as e:
            raise AuthenticationFailedError(f"cannot authenticate with ECR: {e}") from e

        auth_data = response.get("authorizationData") or []
        if not auth_data:
            raise AuthenticationFailedError("cannot authenticate with ECR: no authorization data returned")

        token = auth_data[0].get("authorizationToken", "")
        try:
            decoded = base64.b64decode(token).decode()
        except (binascii.Error, UnicodeDecodeError) as e:
            raise AuthenticationFailedError(f"cannot authenticate with ECR: malformed token: {e}") from e

        username, sep, password = decoded.partition(":")
        if not sep:
            raise AuthenticationFailedError("cannot authenticate with ECR: malformed token")

        logger.debug("Obtained ECR credentials for %s", auth_data[0].get("proxyEndpoint", region))
        return username, password
