"""
Amplify branch resource wrapper.

Branches are addressed by ``APPID/BRANCHNAME``.  Branch names may contain
``/`` themselves, so only the first separator splits the ID.
"""

from __future__ import annotations

from logging import getLogger

from botocore.exceptions import ClientError

from awsprovider_core.aws import error_code
from awsprovider_core.aws.base import AWSResource
from awsprovider_core.aws.ids import AMPLIFY_BRANCH_ID

LOG = getLogger(__name__)


class AmplifyBranch(AWSResource):
    """Wrapper around an Amplify app branch.

    :param app_id: Amplify app ID.
    :param branch_name: Branch name.
    :param region: AWS region.
    :param role_arn: IAM role ARN for cross-account access.
    :param session: Pre-configured ``boto3.Session``.
    """

    def __init__(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self, app_id, branch_name, region=None, role_arn=None, session=None
    ):
        super().__init__(
            AMPLIFY_BRANCH_ID.create(app_id, branch_name),
            "amplify",
            region=region,
            role_arn=role_arn,
            session=session,
        )
        self._app_id = app_id
        self._branch_name = branch_name

    @classmethod
    def from_id(cls, resource_id, region=None, role_arn=None, session=None) -> AmplifyBranch:
        """Build the wrapper from an ``APPID/BRANCHNAME`` ID.

        :raises MalformedIDError: If ``resource_id`` can't be parsed.
        """
        app_id, branch_name = AMPLIFY_BRANCH_ID.parse(resource_id)
        return cls(app_id, branch_name, region=region, role_arn=role_arn, session=session)

    @property
    def app_id(self) -> str:
        """Return the Amplify app ID."""
        return self._app_id

    @property
    def branch_name(self) -> str:
        """Return the branch name."""
        return self._branch_name

    @property
    def exists(self) -> bool:
        """Return ``True`` if the branch exists.

        Returns ``False`` if the API raises ``NotFoundException``.
        """
        try:
            self._client.get_branch(appId=self._app_id, branchName=self._branch_name)
            return True
        except ClientError as err:
            if error_code(err) == "NotFoundException":
                return False
            raise

    def delete(self) -> None:
        """Delete the branch.

        Idempotent -- does nothing if the branch does not exist.
        """
        try:
            self._client.delete_branch(appId=self._app_id, branchName=self._branch_name)
            LOG.info("Deleted Amplify branch %s", self._resource_id)
        except ClientError as err:
            if error_code(err) == "NotFoundException":
                LOG.info("Amplify branch %s does not exist.", self._resource_id)
            else:
                raise
