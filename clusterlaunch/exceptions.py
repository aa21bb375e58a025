"""Exceptions raised by clusterlaunch operations."""

from botocore.exceptions import ClientError

SECURITY_GROUP_EXISTS_CODES = ("InvalidGroup.Duplicate",)


class ClusterLaunchError(Exception):
    """Base class for all clusterlaunch errors."""


class ConfigurationError(ClusterLaunchError):
    """Required input is missing or malformed."""


class CredentialError(ClusterLaunchError):
    """Credentials could not be built or were rejected by AWS."""


class ProvisioningError(ClusterLaunchError):
    """AWS rejected a create, describe, authorize or get request.

    The botocore ``ClientError`` is kept as ``__cause__``; its code and
    message are copied onto the exception so callers need not dig for them.
    """

    def __init__(self, operation: str, code: str, message: str):
        self.operation = operation
        self.code = code
        self.message = message
        super().__init__(f"{operation} failed ({code}): {message}")

    @classmethod
    def from_client_error(cls, e: ClientError) -> "ProvisioningError":
        err = e.response.get("Error", {})
        return cls(
            e.operation_name,
            err.get("Code", "Unknown"),
            err.get("Message", str(e)),
        )


def error_code(e: ClientError) -> str:
    return e.response.get("Error", {}).get("Code", "")


def is_already_exists(e: ClientError) -> bool:
    """True when AWS reports that the security group being created exists."""
    return error_code(e) in SECURITY_GROUP_EXISTS_CODES
