"""Security groups and key pairs for cluster instances."""

from botocore.exceptions import ClientError

from .exceptions import ConfigurationError, ProvisioningError, is_already_exists
from .types import IngressRule, KeyPair, SecretMaterial
from .utils import log, split_list, warn


def create_security_group(ec2, name: str, description: str) -> str | None:
    """Create a security group, tolerating one that already exists.

    :param ec2: Boto3 EC2 client instance
    :param name: Security group name
    :param description: Security group description
    :return: New group ID, or None if the group already existed
    :raises ConfigurationError: If name is empty
    :raises ProvisioningError: If AWS rejects the request for any other reason
    """
    if not name:
        raise ConfigurationError("Security group name must not be empty")

    try:
        response = ec2.create_security_group(GroupName=name, Description=description)
    except ClientError as e:
        if is_already_exists(e):
            warn(f"Security group '{name}' already exists, skipping creation")
            return None
        raise ProvisioningError.from_client_error(e) from e

    log(f"Created security group: '{name}'")
    return response.get("GroupId")


def ip_permission(rule: IngressRule) -> dict:
    ranges = split_list(rule.ip_ranges) if isinstance(rule.ip_ranges, str) else list(rule.ip_ranges)
    return {
        "IpProtocol": rule.protocol,
        "FromPort": rule.from_port,
        "ToPort": rule.to_port,
        "IpRanges": [{"CidrIp": cidr} for cidr in ranges],
    }


def add_ingress_rule(ec2, group_name: str, rule: IngressRule) -> None:
    """Authorize one ingress permission on the named security group.

    Duplicate rules are not tolerated; AWS's error is raised as-is.

    :param ec2: Boto3 EC2 client instance
    :param group_name: Security group name
    :param rule: Ingress rule to add
    :raises ConfigurationError: If group_name is empty
    :raises ProvisioningError: If AWS rejects the request
    """
    if not group_name:
        raise ConfigurationError("Security group name must not be empty")

    permission = ip_permission(rule)
    try:
        ec2.authorize_security_group_ingress(
            GroupName=group_name, IpPermissions=[permission]
        )
    except ClientError as e:
        raise ProvisioningError.from_client_error(e) from e

    cidrs = ", ".join(r["CidrIp"] for r in permission["IpRanges"])
    log(
        f"Added {rule.protocol} {rule.from_port}-{rule.to_port} from '{cidrs}' "
        f"to security group '{group_name}'"
    )


def create_key_pair(ec2, name: str) -> KeyPair:
    """Create a key pair and return its private key.

    The private key is only ever disclosed by this call. It is wrapped in
    :class:`SecretMaterial` and never logged; storing it is up to the caller.

    :param ec2: Boto3 EC2 client instance
    :param name: Key pair name
    :return: Key pair with its private key material
    :raises ConfigurationError: If name is empty
    :raises ProvisioningError: If AWS rejects the request, including duplicates
    """
    if not name:
        raise ConfigurationError("Key pair name must not be empty")

    try:
        response = ec2.create_key_pair(KeyName=name)
    except ClientError as e:
        raise ProvisioningError.from_client_error(e) from e

    key_pair = KeyPair(
        name=response.get("KeyName", name),
        private_key_material=SecretMaterial(response["KeyMaterial"]),
        fingerprint=response.get("KeyFingerprint"),
        key_pair_id=response.get("KeyPairId"),
    )
    log(f"Created key pair: '{key_pair.name}' ({key_pair.fingerprint})")
    return key_pair
