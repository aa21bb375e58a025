"""Stateless entry point for cluster provisioning against one region."""

from .autoscaling import create_auto_scaling_group, create_launch_config
from .clients import ClientFactory, DefaultClientFactory
from .config import Settings
from .credentials import CredentialSource, check_credentials, resolve_credentials
from .instances import list_availability_zones, list_instances
from .security import add_ingress_rule, create_key_pair, create_security_group
from .storage import download_object, list_objects
from .types import (
    AutoScalingGroupSpec,
    AvailabilityZone,
    Credentials,
    IngressRule,
    InstanceRecord,
    KeyPair,
    LaunchConfigSpec,
    LocalArtifact,
    ObjectSummary,
    ServiceName,
)


class ClusterClient:
    """Provisioning operations bound to one credential set and one region.

    Holds no client: each method asks the factory for a new one, so instances
    can be shared between threads. Call order is up to the caller; a launch
    configuration must exist before a group refers to it.
    """

    def __init__(
        self,
        credentials: Credentials,
        region: str,
        client_factory: ClientFactory | None = None,
    ):
        self.credentials = credentials
        self.region = region
        self.client_factory = client_factory or DefaultClientFactory()

    @classmethod
    def from_settings(
        cls, settings: Settings, client_factory: ClientFactory | None = None
    ) -> "ClusterClient":
        """Resolve credentials once from settings and bind them to its region."""
        factory = client_factory or DefaultClientFactory()
        credentials = resolve_credentials(CredentialSource(settings, factory))
        return cls(credentials, settings.region, factory)

    def _client(self, service: ServiceName):
        return self.client_factory.create_client(service, self.credentials, self.region)

    def validate_auth(self) -> dict:
        return check_credentials(self.credentials, self.region, self.client_factory)

    def create_security_group(self, name: str, description: str) -> str | None:
        return create_security_group(self._client("ec2"), name, description)

    def add_ingress_rule(self, group_name: str, rule: IngressRule) -> None:
        add_ingress_rule(self._client("ec2"), group_name, rule)

    def create_key_pair(self, name: str) -> KeyPair:
        return create_key_pair(self._client("ec2"), name)

    def create_launch_config(self, spec: LaunchConfigSpec) -> None:
        create_launch_config(self._client("autoscaling"), spec)

    def create_auto_scaling_group(self, spec: AutoScalingGroupSpec) -> None:
        create_auto_scaling_group(self._client("autoscaling"), spec)

    def list_instances(self, group_name: str, status: str | None = None) -> list[InstanceRecord]:
        return list_instances(self._client("ec2"), group_name, status)

    def list_availability_zones(self) -> list[AvailabilityZone]:
        return list_availability_zones(self._client("ec2"))

    def list_objects(self, bucket: str, prefix: str = "") -> list[ObjectSummary]:
        return list_objects(self._client("s3"), bucket, prefix)

    def download_object(self, bucket: str, key: str, target_directory: str) -> LocalArtifact:
        return download_object(self._client("s3"), bucket, key, target_directory)
