"""S3 listing and download of cluster input artifacts."""

import os
import shutil
from pathlib import Path

from botocore.exceptions import ClientError

from .exceptions import ConfigurationError, ProvisioningError
from .types import LocalArtifact, ObjectSummary
from .utils import log

CHUNK_SIZE = 1024 * 1024


def list_objects(s3, bucket: str, prefix: str = "") -> list[ObjectSummary]:
    """List objects under a bucket prefix.

    Only the first page AWS returns is read.

    :param s3: Boto3 S3 client instance
    :param bucket: Bucket name
    :param prefix: Key prefix (default: whole bucket)
    :return: Object summaries in listing order
    :raises ProvisioningError: If the bucket is missing or inaccessible
    """
    try:
        response = s3.list_objects_v2(Bucket=bucket, Prefix=prefix)
    except ClientError as e:
        raise ProvisioningError.from_client_error(e) from e

    objects: list[ObjectSummary] = [
        {"bucket": bucket, "key": obj["Key"], "size": obj.get("Size", 0)}
        for obj in response.get("Contents", [])
    ]
    log(f"Found {len(objects)} object(s) in 's3://{bucket}/{prefix}'")
    return objects


def join_target_path(target_directory: str, key: str) -> str:
    """Join a directory and an object key with exactly one separator.

    ``/data/`` and ``/data`` both give ``/data/a/b.txt`` for key ``a/b.txt``;
    a leading slash on the key is dropped.
    """
    return target_directory.rstrip(os.sep) + os.sep + key.lstrip("/")


def _check_inside(target_directory: str, target: str) -> None:
    root = Path(target_directory).resolve()
    if not Path(target).resolve().is_relative_to(root):
        raise ConfigurationError(f"'{target}' escapes target directory '{target_directory}'")


def download_object(s3, bucket: str, key: str, target_directory: str) -> LocalArtifact:
    """Download one object into a local directory, keeping its key as path.

    Parent directories are created as needed.

    :param s3: Boto3 S3 client instance
    :param bucket: Bucket name
    :param key: Object key
    :param target_directory: Local directory to write under
    :return: Key and local path of the downloaded file
    :raises ConfigurationError: If key is empty or would be written outside target_directory
    :raises ProvisioningError: If the object is missing or inaccessible
    :raises OSError: If the local file cannot be written
    """
    if not key.strip("/"):
        raise ConfigurationError("Object key must not be empty")

    target = join_target_path(target_directory, key)
    _check_inside(target_directory, target)

    try:
        response = s3.get_object(Bucket=bucket, Key=key)
    except ClientError as e:
        raise ProvisioningError.from_client_error(e) from e

    Path(target).parent.mkdir(parents=True, exist_ok=True)
    body = response["Body"]
    try:
        with open(target, "wb") as f:
            shutil.copyfileobj(body, f, CHUNK_SIZE)
    finally:
        body.close()

    log(f"Downloaded 's3://{bucket}/{key}' to '{target}'")
    return {"source_key": key, "path": target}
