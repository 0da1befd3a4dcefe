"""
Budgets action resource wrapper.

Actions are addressed by ``AccountID:ActionID:BudgetName``.
"""

from __future__ import annotations

from logging import getLogger

from botocore.exceptions import ClientError

from awsprovider_core.aws import error_code
from awsprovider_core.aws.base import AWSResource
from awsprovider_core.aws.ids import BUDGET_ACTION_ID
from awsprovider_core.resource.exceptions import NotFoundError

LOG = getLogger(__name__)

AVAILABLE_TIMEOUT = 5 * 60

_PENDING_STATES = [
    "PENDING",
    "EXECUTION_IN_PROGRESS",
    "REVERSE_IN_PROGRESS",
    "RESET_IN_PROGRESS",
]
_SETTLED_STATES = [
    "STANDBY",
    "EXECUTION_SUCCESS",
    "EXECUTION_FAILURE",
    "REVERSE_SUCCESS",
    "REVERSE_FAILURE",
    "RESET_FAILURE",
]


class BudgetAction(AWSResource):
    """Wrapper around a budget action.

    :param account_id: ID of the account that owns the budget.
    :param action_id: Budget action ID.
    :param budget_name: Name of the budget.
    :param region: AWS region.
    :param role_arn: IAM role ARN for cross-account access.
    :param session: Pre-configured ``boto3.Session``.
    """

    def __init__(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self, account_id, action_id, budget_name, region=None, role_arn=None, session=None
    ):
        super().__init__(
            BUDGET_ACTION_ID.create(account_id, action_id, budget_name),
            "budgets",
            region=region,
            role_arn=role_arn,
            session=session,
        )
        self._account_id = account_id
        self._action_id = action_id
        self._budget_name = budget_name

    @classmethod
    def from_id(cls, resource_id, region=None, role_arn=None, session=None) -> BudgetAction:
        """Build the wrapper from an ``AccountID:ActionID:BudgetName`` ID.

        :raises MalformedIDError: If ``resource_id`` can't be parsed.
        """
        account_id, action_id, budget_name = BUDGET_ACTION_ID.parse(resource_id)
        return cls(account_id, action_id, budget_name, region=region, role_arn=role_arn, session=session)

    @property
    def action(self) -> dict:
        """Return the budget action.

        :raises NotFoundError: If the action doesn't exist.
        """
        try:
            response = self._client.describe_budget_action(
                AccountId=self._account_id,
                BudgetName=self._budget_name,
                ActionId=self._action_id,
            )
        except ClientError as err:
            if error_code(err) == "NotFoundException":
                raise NotFoundError(f"Budget action {self._resource_id} not found", last_error=err) from err
            raise
        action = response.get("Action")
        if not action:
            raise NotFoundError(f"Budget action {self._resource_id} not found")
        return action

    @property
    def exists(self) -> bool:
        """Return ``True`` if the budget action exists."""
        try:
            _ = self.action
            return True
        except NotFoundError:
            return False

    def status_refresh(self):
        """Return a refresh function reporting the action status."""
        return self._status_refresh(lambda: self.action, "Status")

    def wait_available(self, timeout=AVAILABLE_TIMEOUT) -> dict:
        """Wait until no execution, reversal or reset is in progress."""
        return self._wait(
            self.status_refresh(),
            pending=_PENDING_STATES,
            target=_SETTLED_STATES,
            timeout=timeout,
        )

    def delete(self) -> None:
        """Delete the budget action.

        Idempotent -- does nothing if the action does not exist.
        """
        try:
            self._client.delete_budget_action(
                AccountId=self._account_id,
                BudgetName=self._budget_name,
                ActionId=self._action_id,
            )
            LOG.info("Deleted budget action %s", self._resource_id)
        except ClientError as err:
            if error_code(err) == "NotFoundException":
                LOG.info("Budget action %s does not exist.", self._resource_id)
            else:
                raise
