"""Type definitions for clusterlaunch."""

from dataclasses import dataclass, field
from typing import Literal, TypedDict

ServiceName = Literal["ec2", "autoscaling", "s3", "sts"]

ASG_GROUP_NAME_TAG = "aws:autoscaling:groupName"


@dataclass(frozen=True)
class BasicCredentials:
    """Long-lived access key pair."""

    access_key_id: str
    secret_access_key: str = field(repr=False)

    def session_kwargs(self) -> dict:
        return {
            "aws_access_key_id": self.access_key_id,
            "aws_secret_access_key": self.secret_access_key,
        }


@dataclass(frozen=True)
class SessionCredentials:
    """Temporary credentials obtained by assuming a role."""

    access_key_id: str
    secret_access_key: str = field(repr=False)
    session_token: str = field(repr=False)

    def session_kwargs(self) -> dict:
        return {
            "aws_access_key_id": self.access_key_id,
            "aws_secret_access_key": self.secret_access_key,
            "aws_session_token": self.session_token,
        }


Credentials = BasicCredentials | SessionCredentials


class SecretMaterial:
    """Secret string that stays masked in logs, reprs and f-strings.

    The cleartext is only handed out by :meth:`reveal`.
    """

    __slots__ = ("_value",)

    def __init__(self, value: str):
        self._value = value

    def reveal(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return "SecretMaterial('**********')"

    def __str__(self) -> str:
        return "**********"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SecretMaterial):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __reduce__(self):
        raise TypeError("SecretMaterial cannot be pickled")


@dataclass(frozen=True)
class KeyPair:
    name: str
    private_key_material: SecretMaterial
    fingerprint: str | None = None
    key_pair_id: str | None = None


@dataclass(frozen=True)
class IngressRule:
    """One ingress permission. ``ip_ranges`` accepts a comma-delimited string."""

    ip_ranges: str | tuple[str, ...]
    protocol: str
    from_port: int
    to_port: int


@dataclass(frozen=True)
class LaunchConfigSpec:
    """Launch configuration request.

    ``security_groups`` is a comma-delimited string. Optional fields left as
    None are not sent to AWS at all.
    """

    name: str
    image_id: str
    instance_type: str
    key_name: str
    security_groups: str
    user_data: str
    kernel_id: str | None = None
    ramdisk_id: str | None = None
    block_device_mapping: dict | None = None
    iam_instance_profile: str | None = None
    monitoring_enabled: bool | None = None


@dataclass(frozen=True)
class AutoScalingGroupSpec:
    """Auto-scaling group request.

    ``tags`` holds ``(key, value)`` pairs or ``{"Key": .., "Value": ..}``
    mappings. List-valued optional fields are comma-delimited strings.
    """

    name: str
    launch_config_name: str
    min_size: int
    max_size: int
    desired_capacity: int
    tags: tuple = field(default_factory=tuple)
    availability_zones: str | None = None
    cooldown_seconds: int | None = None
    health_check_grace_period_seconds: int | None = None
    health_check_type: str | None = None
    load_balancer_names: str | None = None
    termination_policies: str | None = None


class InstanceRecord(TypedDict, total=False):
    """Instance tagged to an auto-scaling group."""

    instance_id: str
    lifecycle_state: str | None
    group_name: str | None
    region: str
    instance_type: str
    private_ip: str
    public_ip: str


class AvailabilityZone(TypedDict, total=False):
    name: str
    zone_id: str
    state: str
    region: str


class ObjectSummary(TypedDict):
    bucket: str
    key: str
    size: int


class LocalArtifact(TypedDict):
    source_key: str
    path: str
