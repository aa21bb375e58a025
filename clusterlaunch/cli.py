#!/usr/bin/env python3
"""Provision AWS clusters: security groups, key pairs, launch configurations,
auto-scaling groups, and the S3 artifacts they run on.

Credentials come from AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY (or a .env
file); set CLUSTERLAUNCH_ASSUME_ROLE=true and CLUSTERLAUNCH_ROLE_ARN to work
through an assumed role.

Usage: uv run clusterlaunch <noun> <verb> [options]

Examples:
    uv run clusterlaunch security-group create etl-sg --description "Cluster SG"
    uv run clusterlaunch security-group allow etl-sg --ip-ranges 10.0.0.0/16 --from-port 22 --to-port 22
    uv run clusterlaunch key-pair create etl-key --output etl-key.pem
    uv run clusterlaunch instance list etl-workers --status running
    uv run clusterlaunch s3 download my-bucket jobs/job.conf ./staging
"""

import logging
import os
from contextlib import contextmanager
from pathlib import Path

import cyclopts
from rich import print

from .config import load_settings
from .exceptions import ClusterLaunchError
from .provisioner import ClusterClient
from .types import AutoScalingGroupSpec, IngressRule, LaunchConfigSpec
from .utils import error, log, setup_logging

app = cyclopts.App(
    name="clusterlaunch", help="Provision AWS compute clusters", sort_key=None
)

sg_app = cyclopts.App(name="security-group", help="Manage security groups", sort_key=1)
key_app = cyclopts.App(name="key-pair", help="Manage EC2 key pairs", sort_key=2)
lc_app = cyclopts.App(name="launch-config", help="Manage launch configurations", sort_key=3)
group_app = cyclopts.App(name="group", help="Manage auto-scaling groups", sort_key=4)
instance_app = cyclopts.App(name="instance", help="Inspect cluster instances", sort_key=5)
zone_app = cyclopts.App(name="zone", help="Inspect availability zones", sort_key=6)
s3_app = cyclopts.App(name="s3", help="Stage artifacts from S3", sort_key=7)

for sub in (sg_app, key_app, lc_app, group_app, instance_app, zone_app, s3_app):
    app.command(sub)


@contextmanager
def _cluster(region: str | None, verbose: bool):
    """Yield a ClusterClient for the session, turning clusterlaunch errors into exits."""
    setup_logging(logging.DEBUG if verbose else logging.INFO)
    try:
        yield ClusterClient.from_settings(load_settings(region=region))
    except ClusterLaunchError as e:
        error(str(e))


def _parse_tags(tags: list[str] | None) -> tuple:
    parsed = []
    for tag in tags or []:
        if "=" not in tag:
            error(f"Invalid tag '{tag}', expected KEY=VALUE")
        key, value = tag.split("=", 1)
        parsed.append((key.strip(), value.strip()))
    return tuple(parsed)


@sg_app.command(name="create")
def create_security_group(
    name: str,
    *,
    description: str = "Cluster security group",
    region: str | None = None,
    verbose: bool = False,
):
    """Create a security group (no-op if it already exists).

    :param name: Security group name
    :param description: Security group description
    :param region: AWS region (default: AWS_REGION or us-west-2)
    :param verbose: Show debug logging
    """
    with _cluster(region, verbose) as cluster:
        cluster.create_security_group(name, description)


@sg_app.command(name="allow")
def allow_ingress(
    name: str,
    *,
    ip_ranges: str = "0.0.0.0/0",
    protocol: str = "tcp",
    from_port: int,
    to_port: int,
    region: str | None = None,
    verbose: bool = False,
):
    """Add an ingress rule to a security group.

    :param name: Security group name
    :param ip_ranges: Comma-separated CIDR ranges
    :param protocol: IP protocol (tcp, udp, icmp or -1)
    :param from_port: First port of the range
    :param to_port: Last port of the range
    :param region: AWS region
    :param verbose: Show debug logging
    """
    rule = IngressRule(ip_ranges=ip_ranges, protocol=protocol, from_port=from_port, to_port=to_port)
    with _cluster(region, verbose) as cluster:
        cluster.add_ingress_rule(name, rule)


@key_app.command(name="create")
def create_key_pair(
    name: str,
    *,
    output: Path,
    region: str | None = None,
    verbose: bool = False,
):
    """Create a key pair and save its private key to a file readable only by you.

    AWS shows the private key once; it cannot be downloaded again later.

    :param name: Key pair name
    :param output: File to write the private key to (must not exist)
    :param region: AWS region
    :param verbose: Show debug logging
    """
    # the key file is claimed before the key exists; AWS discloses the key once
    try:
        fd = os.open(output, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
    except FileExistsError:
        error(f"'{output}' already exists, refusing to overwrite")
    except OSError as e:
        error(f"Cannot create '{output}': {e.strerror}")

    with os.fdopen(fd, "w") as f:
        try:
            with _cluster(region, verbose) as cluster:
                key_pair = cluster.create_key_pair(name)
        except BaseException:
            f.close()
            output.unlink()
            raise
        f.write(key_pair.private_key_material.reveal())
    log(f"Saved private key for '{key_pair.name}' to '{output}'")


@lc_app.command(name="create")
def create_launch_config(
    name: str,
    *,
    image_id: str,
    instance_type: str,
    key_name: str,
    security_groups: str,
    user_data_file: Path | None = None,
    kernel_id: str | None = None,
    ramdisk_id: str | None = None,
    iam_instance_profile: str | None = None,
    monitoring: bool | None = None,
    region: str | None = None,
    verbose: bool = False,
):
    """Create a launch configuration.

    :param name: Launch configuration name
    :param image_id: AMI ID
    :param instance_type: EC2 instance type (e.g. m5.large)
    :param key_name: Key pair name
    :param security_groups: Comma-separated security group names
    :param user_data_file: File with instance user data
    :param kernel_id: Kernel ID
    :param ramdisk_id: RAM disk ID
    :param iam_instance_profile: IAM instance profile name or ARN
    :param monitoring: Enable detailed CloudWatch monitoring
    :param region: AWS region
    :param verbose: Show debug logging
    """
    spec = LaunchConfigSpec(
        name=name,
        image_id=image_id,
        instance_type=instance_type,
        key_name=key_name,
        security_groups=security_groups,
        user_data=user_data_file.read_text() if user_data_file else "",
        kernel_id=kernel_id,
        ramdisk_id=ramdisk_id,
        iam_instance_profile=iam_instance_profile,
        monitoring_enabled=monitoring,
    )
    with _cluster(region, verbose) as cluster:
        cluster.create_launch_config(spec)


@group_app.command(name="create")
def create_auto_scaling_group(
    name: str,
    *,
    launch_config: str,
    min_size: int,
    max_size: int,
    desired_capacity: int,
    tag: list[str] | None = None,
    availability_zones: str | None = None,
    cooldown: int | None = None,
    health_check_grace_period: int | None = None,
    health_check_type: str | None = None,
    load_balancers: str | None = None,
    termination_policies: str | None = None,
    region: str | None = None,
    verbose: bool = False,
):
    """Create an auto-scaling group. Tags always propagate to instances.

    :param name: Auto-scaling group name
    :param launch_config: Launch configuration name
    :param min_size: Minimum number of instances
    :param max_size: Maximum number of instances
    :param desired_capacity: Desired number of instances
    :param tag: Tag as KEY=VALUE (repeatable)
    :param availability_zones: Comma-separated availability zones
    :param cooldown: Default cooldown in seconds
    :param health_check_grace_period: Health check grace period in seconds
    :param health_check_type: EC2 or ELB
    :param load_balancers: Comma-separated classic load balancer names
    :param termination_policies: Comma-separated termination policies
    :param region: AWS region
    :param verbose: Show debug logging
    """
    spec = AutoScalingGroupSpec(
        name=name,
        launch_config_name=launch_config,
        min_size=min_size,
        max_size=max_size,
        desired_capacity=desired_capacity,
        tags=_parse_tags(tag),
        availability_zones=availability_zones,
        cooldown_seconds=cooldown,
        health_check_grace_period_seconds=health_check_grace_period,
        health_check_type=health_check_type,
        load_balancer_names=load_balancers,
        termination_policies=termination_policies,
    )
    with _cluster(region, verbose) as cluster:
        cluster.create_auto_scaling_group(spec)


@instance_app.command(name="list")
def list_instances(
    group: str,
    *,
    status: str | None = None,
    region: str | None = None,
    verbose: bool = False,
):
    """List instances launched by an auto-scaling group.

    :param group: Auto-scaling group name
    :param status: Only show instances in this state (e.g. running)
    :param region: AWS region
    :param verbose: Show debug logging
    """
    with _cluster(region, verbose) as cluster:
        instances = cluster.list_instances(group, status)

    if not instances:
        return

    max_id = max(len(i["instance_id"]) for i in instances)
    max_ip = max(len(i.get("private_ip", "N/A")) for i in instances)
    print(f"  {'INSTANCE'.ljust(max_id)}  {'PRIVATE IP'.ljust(max_ip)}  STATUS")
    print(f"  {'-' * max_id}  {'-' * max_ip}  ---")
    for i in instances:
        instance_id = i["instance_id"].ljust(max_id)
        ip = i.get("private_ip", "N/A").ljust(max_ip)
        print(f"  {instance_id}  {ip}  {i['lifecycle_state'] or 'unknown'}")


@zone_app.command(name="list")
def list_zones(*, region: str | None = None, verbose: bool = False):
    """List availability zones in the region.

    :param region: AWS region
    :param verbose: Show debug logging
    """
    with _cluster(region, verbose) as cluster:
        zones = cluster.list_availability_zones()

    for zone in zones:
        print(f"  {zone['name']}  {zone.get('zone_id', '')}  {zone.get('state', '')}")


@s3_app.command(name="list")
def list_objects(
    bucket: str,
    *,
    prefix: str = "",
    region: str | None = None,
    verbose: bool = False,
):
    """List objects under a bucket prefix.

    :param bucket: Bucket name
    :param prefix: Key prefix
    :param region: AWS region
    :param verbose: Show debug logging
    """
    with _cluster(region, verbose) as cluster:
        objects = cluster.list_objects(bucket, prefix)

    for obj in objects:
        print(f"  {str(obj['size']).rjust(12)}  {obj['key']}")


@s3_app.command(name="download")
def download_object(
    bucket: str,
    key: str,
    target_directory: str,
    *,
    region: str | None = None,
    verbose: bool = False,
):
    """Download one object into a local directory.

    :param bucket: Bucket name
    :param key: Object key
    :param target_directory: Local directory; the key is kept as relative path
    :param region: AWS region
    :param verbose: Show debug logging
    """
    with _cluster(region, verbose) as cluster:
        artifact = cluster.download_object(bucket, key, target_directory)

    print(f"  {artifact['path']}")


if __name__ == "__main__":
    app()
