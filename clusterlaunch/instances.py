"""Instance and availability-zone queries."""

from botocore.exceptions import ClientError

from .exceptions import ProvisioningError
from .types import ASG_GROUP_NAME_TAG, AvailabilityZone, InstanceRecord
from .utils import log, logger


def _tag_value(instance: dict, key: str) -> str | None:
    return next(
        (tag["Value"] for tag in instance.get("Tags", []) if tag["Key"] == key),
        None,
    )


def _instance_record(instance: dict, region: str) -> InstanceRecord:
    state = instance.get("State")
    record: InstanceRecord = {
        "instance_id": instance["InstanceId"],
        "lifecycle_state": state.get("Name") if state else None,
        "group_name": _tag_value(instance, ASG_GROUP_NAME_TAG),
        "region": region,
    }
    for key, field in [
        ("InstanceType", "instance_type"),
        ("PrivateIpAddress", "private_ip"),
        ("PublicIpAddress", "public_ip"),
    ]:
        if instance.get(key):
            record[field] = instance[key]
    return record


def list_instances(ec2, group_name: str, status: str | None = None) -> list[InstanceRecord]:
    """List instances launched by an auto-scaling group.

    An instance is kept when no status filter is given, when AWS reports no
    state for it, or when its state name equals ``status`` exactly.

    :param ec2: Boto3 EC2 client instance
    :param group_name: Auto-scaling group name
    :param status: Lifecycle state name to keep (e.g. 'running')
    :return: Matching instances across all reservations
    :raises ProvisioningError: If AWS rejects the request
    """
    try:
        response = ec2.describe_instances(
            Filters=[{"Name": f"tag:{ASG_GROUP_NAME_TAG}", "Values": [group_name]}]
        )
    except ClientError as e:
        raise ProvisioningError.from_client_error(e) from e

    region = ec2.meta.region_name
    instances = []
    for reservation in response.get("Reservations", []):
        for instance in reservation.get("Instances", []):
            record = _instance_record(instance, region)
            state = record["lifecycle_state"]
            if status is None or state is None or state == status:
                instances.append(record)
                logger.debug(f"Instance '{record['instance_id']}' ({state}) matches filter '{status}'")
            else:
                logger.debug(f"Instance '{record['instance_id']}' ({state}) skipped by filter '{status}'")

    log(f"Found {len(instances)} instance(s) in group '{group_name}'")
    return instances


def list_availability_zones(ec2) -> list[AvailabilityZone]:
    """List the availability zones of the client's region.

    :param ec2: Boto3 EC2 client instance
    :return: Zone descriptors as reported by AWS
    :raises ProvisioningError: If AWS rejects the request
    """
    try:
        response = ec2.describe_availability_zones()
    except ClientError as e:
        raise ProvisioningError.from_client_error(e) from e

    zones: list[AvailabilityZone] = [
        {
            "name": zone["ZoneName"],
            "zone_id": zone.get("ZoneId", ""),
            "state": zone.get("State", ""),
            "region": zone.get("RegionName", ec2.meta.region_name),
        }
        for zone in response.get("AvailabilityZones", [])
    ]
    log(f"Found {len(zones)} availability zone(s) in '{ec2.meta.region_name}'")
    return zones
