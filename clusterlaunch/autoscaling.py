"""Launch configurations and auto-scaling groups."""

from collections.abc import Iterable

from botocore.exceptions import ClientError

from .exceptions import ConfigurationError, ProvisioningError
from .types import AutoScalingGroupSpec, LaunchConfigSpec
from .utils import log, split_list


def _optional_params(spec, fields: list[tuple[str, str, object]]) -> dict:
    """Copy the optional spec attributes that are set into request params.

    :param spec: Spec dataclass
    :param fields: (attribute, request key, converter or None) triples
    :return: Request params for attributes that are not None
    """
    params = {}
    for attr, key, convert in fields:
        value = getattr(spec, attr)
        if value is None:
            continue
        params[key] = convert(value) if convert else value
    return params


LAUNCH_CONFIG_OPTIONAL_FIELDS = [
    ("kernel_id", "KernelId", None),
    ("ramdisk_id", "RamdiskId", None),
    ("block_device_mapping", "BlockDeviceMappings", lambda m: [m]),
    ("iam_instance_profile", "IamInstanceProfile", None),
    ("monitoring_enabled", "InstanceMonitoring", lambda enabled: {"Enabled": enabled}),
]

AUTO_SCALING_GROUP_OPTIONAL_FIELDS = [
    ("availability_zones", "AvailabilityZones", split_list),
    ("cooldown_seconds", "DefaultCooldown", None),
    ("health_check_grace_period_seconds", "HealthCheckGracePeriod", None),
    ("health_check_type", "HealthCheckType", None),
    ("load_balancer_names", "LoadBalancerNames", split_list),
    ("termination_policies", "TerminationPolicies", split_list),
]


def launch_config_params(spec: LaunchConfigSpec) -> dict:
    params = {
        "LaunchConfigurationName": spec.name,
        "ImageId": spec.image_id,
        "InstanceType": spec.instance_type,
        "KeyName": spec.key_name,
        "SecurityGroups": split_list(spec.security_groups),
        "UserData": spec.user_data,
    }
    params.update(_optional_params(spec, LAUNCH_CONFIG_OPTIONAL_FIELDS))
    return params


def create_launch_config(autoscaling, spec: LaunchConfigSpec) -> None:
    """Create a launch configuration.

    :param autoscaling: Boto3 Auto Scaling client instance
    :param spec: Launch configuration to create
    :raises ConfigurationError: If the name is empty
    :raises ProvisioningError: If AWS rejects the request (duplicate name, bad image, ...)
    """
    if not spec.name:
        raise ConfigurationError("Launch configuration name must not be empty")

    try:
        autoscaling.create_launch_configuration(**launch_config_params(spec))
    except ClientError as e:
        raise ProvisioningError.from_client_error(e) from e

    log(f"Created launch configuration: '{spec.name}'")


def propagated_tags(tags: Iterable) -> list[dict]:
    """Normalize tags and force PropagateAtLaunch on every one of them.

    Instances are found through their group tag, so every group tag must be
    copied onto launched instances whatever the caller asked for.

    :param tags: (key, value) pairs or {"Key", "Value"} mappings
    :return: Tags in Auto Scaling request form
    """
    result = []
    for tag in tags:
        if isinstance(tag, dict):
            key, value = tag["Key"], tag.get("Value", "")
        else:
            key, value = tag
        result.append({"Key": key, "Value": value, "PropagateAtLaunch": True})
    return result


def auto_scaling_group_params(spec: AutoScalingGroupSpec) -> dict:
    params = {
        "AutoScalingGroupName": spec.name,
        "LaunchConfigurationName": spec.launch_config_name,
        "MinSize": spec.min_size,
        "MaxSize": spec.max_size,
        "DesiredCapacity": spec.desired_capacity,
        "Tags": propagated_tags(spec.tags),
    }
    params.update(_optional_params(spec, AUTO_SCALING_GROUP_OPTIONAL_FIELDS))
    return params


def create_auto_scaling_group(autoscaling, spec: AutoScalingGroupSpec) -> None:
    """Create an auto-scaling group from an existing launch configuration.

    Size ordering (min <= desired <= max) is left to AWS to validate.

    :param autoscaling: Boto3 Auto Scaling client instance
    :param spec: Auto-scaling group to create
    :raises ConfigurationError: If the name is empty
    :raises ProvisioningError: If AWS rejects the request
    """
    if not spec.name:
        raise ConfigurationError("Auto-scaling group name must not be empty")

    try:
        autoscaling.create_auto_scaling_group(**auto_scaling_group_params(spec))
    except ClientError as e:
        raise ProvisioningError.from_client_error(e) from e

    log(
        f"Created auto-scaling group: '{spec.name}' "
        f"(min={spec.min_size}, desired={spec.desired_capacity}, max={spec.max_size})"
    )
