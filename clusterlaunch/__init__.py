"""clusterlaunch - provision AWS compute clusters and stage their S3 inputs."""

from .autoscaling import create_auto_scaling_group, create_launch_config
from .clients import ClientFactory, DefaultClientFactory
from .config import Settings, load_settings
from .credentials import CredentialSource, check_credentials, resolve_credentials
from .exceptions import (
    ClusterLaunchError,
    ConfigurationError,
    CredentialError,
    ProvisioningError,
)
from .instances import list_availability_zones, list_instances
from .provisioner import ClusterClient
from .security import add_ingress_rule, create_key_pair, create_security_group
from .storage import download_object, join_target_path, list_objects
from .types import (
    AutoScalingGroupSpec,
    AvailabilityZone,
    BasicCredentials,
    Credentials,
    IngressRule,
    InstanceRecord,
    KeyPair,
    LaunchConfigSpec,
    LocalArtifact,
    ObjectSummary,
    SecretMaterial,
    SessionCredentials,
)
from .utils import setup_logging, split_list

__all__ = [
    "ClusterClient",
    "ClientFactory",
    "DefaultClientFactory",
    "CredentialSource",
    "Settings",
    "load_settings",
    "resolve_credentials",
    "check_credentials",
    "create_security_group",
    "add_ingress_rule",
    "create_key_pair",
    "create_launch_config",
    "create_auto_scaling_group",
    "list_instances",
    "list_availability_zones",
    "list_objects",
    "download_object",
    "join_target_path",
    "split_list",
    "setup_logging",
    "ClusterLaunchError",
    "ConfigurationError",
    "CredentialError",
    "ProvisioningError",
    "AutoScalingGroupSpec",
    "AvailabilityZone",
    "BasicCredentials",
    "Credentials",
    "IngressRule",
    "InstanceRecord",
    "KeyPair",
    "LaunchConfigSpec",
    "LocalArtifact",
    "ObjectSummary",
    "SecretMaterial",
    "SessionCredentials",
]
