import pytest
from botocore.stub import Stubber

from clusterlaunch.exceptions import ProvisioningError
from clusterlaunch.instances import list_availability_zones, list_instances

from helpers import REGION, make_client

GROUP_FILTER = {"Filters": [{"Name": "tag:aws:autoscaling:groupName", "Values": ["G"]}]}


def _instance(instance_id, state=None, **extra):
    instance = {
        "InstanceId": instance_id,
        "InstanceType": "m5.large",
        "Tags": [{"Key": "aws:autoscaling:groupName", "Value": "G"}],
        **extra,
    }
    if state:
        instance["State"] = {"Code": 16 if state == "running" else 80, "Name": state}
    return instance


DESCRIBE_RESPONSE = {
    "Reservations": [
        {
            "ReservationId": "r-1",
            "Instances": [
                _instance("i-running", "running", PrivateIpAddress="10.0.0.5"),
                _instance("i-stopped", "stopped"),
            ],
        },
        {"ReservationId": "r-2", "Instances": [_instance("i-unknown")]},
    ]
}


@pytest.fixture
def ec2():
    return make_client("ec2")


def _list(ec2, status):
    with Stubber(ec2) as stubber:
        stubber.add_response("describe_instances", DESCRIBE_RESPONSE, GROUP_FILTER)
        return list_instances(ec2, "G", status)


def test_status_filter_keeps_matching_and_stateless_instances(ec2):
    instances = _list(ec2, "running")
    assert [i["instance_id"] for i in instances] == ["i-running", "i-unknown"]


def test_no_status_filter_returns_all_reservations(ec2):
    instances = _list(ec2, None)
    assert [i["instance_id"] for i in instances] == ["i-running", "i-stopped", "i-unknown"]


def test_status_filter_is_case_sensitive(ec2):
    instances = _list(ec2, "Running")
    assert [i["instance_id"] for i in instances] == ["i-unknown"]


def test_instance_record_fields(ec2):
    running, _stopped, unknown = _list(ec2, None)
    assert running == {
        "instance_id": "i-running",
        "lifecycle_state": "running",
        "group_name": "G",
        "region": REGION,
        "instance_type": "m5.large",
        "private_ip": "10.0.0.5",
    }
    assert unknown["lifecycle_state"] is None
    assert "public_ip" not in unknown


def test_list_instances_empty_group(ec2):
    with Stubber(ec2) as stubber:
        stubber.add_response("describe_instances", {"Reservations": []}, GROUP_FILTER)
        assert list_instances(ec2, "G", "running") == []


def test_list_instances_raises_provider_errors(ec2):
    with Stubber(ec2) as stubber:
        stubber.add_client_error(
            "describe_instances", service_error_code="RequestLimitExceeded", http_status_code=503
        )
        with pytest.raises(ProvisioningError):
            list_instances(ec2, "G")


def test_list_availability_zones(ec2):
    response = {
        "AvailabilityZones": [
            {"ZoneName": "us-east-1a", "ZoneId": "use1-az6", "State": "available", "RegionName": REGION},
            {"ZoneName": "us-east-1b", "ZoneId": "use1-az1", "State": "impaired", "RegionName": REGION},
        ]
    }
    with Stubber(ec2) as stubber:
        stubber.add_response("describe_availability_zones", response, {})
        zones = list_availability_zones(ec2)

    assert zones == [
        {"name": "us-east-1a", "zone_id": "use1-az6", "state": "available", "region": REGION},
        {"name": "us-east-1b", "zone_id": "use1-az1", "state": "impaired", "region": REGION},
    ]
