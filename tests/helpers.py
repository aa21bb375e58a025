"""Client builders shared by the test modules."""

import boto3

REGION = "us-east-1"


def make_client(service: str):
    return boto3.client(
        service,
        region_name=REGION,
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


class RecordingFactory:
    """ClientFactory that hands out prepared clients and records each request."""

    def __init__(self, clients: dict | None = None):
        self.clients = clients or {}
        self.calls = []

    def create_client(self, service, credentials, region):
        self.calls.append((service, credentials, region))
        if service in self.clients:
            return self.clients[service]
        return make_client(service)
