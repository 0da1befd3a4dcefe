"""
AWS session and client helpers, and ``ClientError`` classification.
"""

from logging import getLogger

import boto3
from botocore.exceptions import ClientError

LOG = getLogger(__name__)

# Session name used when assuming a role.
_ROLE_SESSION_NAME = "awsprovider-core"


def assume_role(role_arn, region=None, session_name=_ROLE_SESSION_NAME) -> boto3.Session:
    """Assume an IAM role and return a session with its temporary credentials.

    :param role_arn: ARN of the role to assume.
    :param region: Region of the returned session.
    :param session_name: Role session name, shows up in CloudTrail.
    :return: A ``boto3.Session`` bound to the role.
    """
    sts = boto3.client("sts", region_name=region)
    response = sts.assume_role(RoleArn=role_arn, RoleSessionName=session_name)
    credentials = response["Credentials"]
    LOG.debug("Assumed role %s", role_arn)
    return boto3.Session(
        aws_access_key_id=credentials["AccessKeyId"],
        aws_secret_access_key=credentials["SecretAccessKey"],
        aws_session_token=credentials["SessionToken"],
        region_name=region,
    )


def get_session(region=None, role_arn=None, profile_name=None) -> boto3.Session:
    """Return a ``boto3.Session``.

    :param region: AWS region. Falls back to the environment / config files.
    :param role_arn: If given, assume this role first.
    :param profile_name: Named profile from the AWS config files.
    """
    if role_arn:
        return assume_role(role_arn, region=region)
    return boto3.Session(region_name=region, profile_name=profile_name)


def get_client(service_name, region=None, role_arn=None):
    """Return a boto3 client for ``service_name``.

    :param service_name: AWS service name, e.g. ``"dms"``, ``"ec2"``.
    :param region: AWS region.
    :param role_arn: IAM role ARN for cross-account access.
    """
    return get_session(region=region, role_arn=role_arn).client(service_name, region_name=region)


def error_code(err: ClientError) -> str:
    """Return the AWS error code of a ``ClientError``."""
    return err.response.get("Error", {}).get("Code", "")


def error_message(err: ClientError) -> str:
    """Return the AWS error message of a ``ClientError``."""
    return err.response.get("Error", {}).get("Message", "")


def is_aws_error(err, code, message="") -> bool:
    """Return ``True`` if ``err`` is a ``ClientError`` with ``code``.

    :param message: If not empty, the error message must also contain it.
    """
    if not isinstance(err, ClientError):
        return False
    return error_code(err) == code and message in error_message(err)
