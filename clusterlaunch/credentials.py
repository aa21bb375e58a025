"""Credential selection for a provisioning session.

A session either uses the configured access key pair directly or trades it
through STS AssumeRole for temporary credentials. The choice is made once,
by :func:`resolve_credentials`, from the session settings.
"""

from botocore.exceptions import ClientError

from .clients import ClientFactory, DefaultClientFactory
from .config import Settings
from .exceptions import ConfigurationError, CredentialError, error_code
from .types import BasicCredentials, Credentials, SessionCredentials
from .utils import log

EXPIRED_TOKEN_CODES = ("ExpiredToken", "ExpiredTokenException")


class CredentialSource:
    """Supplies basic or assumed-role credentials from session settings."""

    def __init__(self, settings: Settings, client_factory: ClientFactory | None = None):
        self.settings = settings
        self.client_factory = client_factory or DefaultClientFactory()
        self._session_credentials: SessionCredentials | None = None

    @property
    def assume_role_enabled(self) -> bool:
        return self.settings.assume_role_enabled

    def get_basic_credentials(self) -> BasicCredentials:
        """:raises ConfigurationError: If the access key or secret key is not set"""
        missing = [
            name
            for name, value in [
                ("AWS_ACCESS_KEY_ID", self.settings.access_key_id),
                ("AWS_SECRET_ACCESS_KEY", self.settings.secret_access_key),
            ]
            if not value
        ]
        if missing:
            raise ConfigurationError(f"Missing credential settings: {', '.join(missing)}")
        return BasicCredentials(
            access_key_id=self.settings.access_key_id,
            secret_access_key=self.settings.secret_access_key,
        )

    def get_session_credentials(self) -> SessionCredentials:
        """Assume the configured role and return its temporary credentials.

        The role is assumed once; later calls return the same credentials.

        :return: Session credentials from STS
        :raises ConfigurationError: If no role ARN or base credentials are configured
        :raises CredentialError: If STS rejects the request
        """
        if self._session_credentials is not None:
            return self._session_credentials

        if not self.settings.role_arn:
            raise ConfigurationError(
                "CLUSTERLAUNCH_ROLE_ARN is required when assume-role is enabled"
            )

        basic = self.get_basic_credentials()
        sts = self.client_factory.create_client("sts", basic, self.settings.region)

        params = {
            "RoleArn": self.settings.role_arn,
            "RoleSessionName": self.settings.role_session_name,
            "DurationSeconds": self.settings.session_duration_seconds,
        }
        if self.settings.external_id:
            params["ExternalId"] = self.settings.external_id

        try:
            response = sts.assume_role(**params)
        except ClientError as e:
            raise CredentialError(
                f"Could not assume role '{self.settings.role_arn}' ({error_code(e)}): {e}"
            ) from e

        creds = response["Credentials"]
        self._session_credentials = SessionCredentials(
            access_key_id=creds["AccessKeyId"],
            secret_access_key=creds["SecretAccessKey"],
            session_token=creds["SessionToken"],
        )
        log(f"Assumed role '{self.settings.role_arn}' (expires {creds.get('Expiration')})")
        return self._session_credentials


def resolve_credentials(source: CredentialSource) -> Credentials:
    """Pick session credentials when assume-role is enabled, else basic ones."""
    if source.assume_role_enabled:
        return source.get_session_credentials()
    return source.get_basic_credentials()


def check_credentials(
    credentials: Credentials,
    region: str,
    client_factory: ClientFactory | None = None,
) -> dict:
    """Validate credentials against STS, fail fast if expired or invalid.

    :param credentials: Credentials to check
    :param region: Region for the STS client
    :param client_factory: Factory for the STS client (default: uncached)
    :return: Caller identity (Account, Arn, UserId)
    :raises CredentialError: If the credentials are expired or rejected
    """
    factory = client_factory or DefaultClientFactory()
    sts = factory.create_client("sts", credentials, region)
    try:
        identity = sts.get_caller_identity()
    except ClientError as e:
        code = error_code(e)
        if code in EXPIRED_TOKEN_CODES:
            raise CredentialError("AWS credentials expired") from e
        raise CredentialError(f"AWS authentication failed ({code}): {e}") from e

    log(f"AWS: region={region}  account={identity.get('Account', 'unknown')}")
    return identity
