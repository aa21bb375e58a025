"""boto3 client construction, one fresh client per call."""

from typing import Protocol

import boto3

from .exceptions import ConfigurationError, CredentialError
from .types import Credentials, ServiceName


class ClientFactory(Protocol):
    """Builds a service client bound to one region and one credential set.

    Implementations may pool or cache clients; the default never does.
    """

    def create_client(
        self, service: ServiceName, credentials: Credentials, region: str
    ): ...


class DefaultClientFactory:
    """Uncached factory: every call builds a new boto3 session and client."""

    def create_client(self, service: ServiceName, credentials: Credentials, region: str):
        """Create a boto3 client for ``service`` in ``region``.

        :param service: AWS service name (ec2, autoscaling, s3, sts)
        :param credentials: Basic or session credentials
        :param region: AWS region name
        :return: New boto3 client
        :raises ConfigurationError: If region is empty
        :raises CredentialError: If a key, secret or session token is empty
        """
        if not region:
            raise ConfigurationError(f"A region is required to create a '{service}' client")
        kwargs = credentials.session_kwargs()
        if not all(kwargs.values()):
            raise CredentialError(
                f"Incomplete credentials for '{service}' client: "
                + ", ".join(k for k, v in kwargs.items() if not v)
            )
        session = boto3.Session(region_name=region, **kwargs)
        return session.client(service, region_name=region)
