"""
EventBridge rule resource wrapper.

A rule lives on an event bus; its ID is the bare rule name on the
``default`` bus and ``<bus>/<rule>`` elsewhere (see
:func:`~awsprovider_core.aws.ids.rule_create_id`).  Partner event bus names
contain slashes themselves, which :meth:`EventBridgeRule.from_id` accounts for.
A rule can't be deleted while it still has targets, so ``delete()`` detaches
them first.
"""

from __future__ import annotations

from logging import getLogger

from botocore.exceptions import ClientError

from awsprovider_core.aws import error_code
from awsprovider_core.aws.base import AWSResource
from awsprovider_core.aws.ids import (
    DEFAULT_EVENT_BUS_NAME,
    rule_create_id,
    rule_parse_id,
    target_create_id,
)

LOG = getLogger(__name__)

_NOT_FOUND_CODE = "ResourceNotFoundException"


class EventBridgeRule(AWSResource):
    """Wrapper around an EventBridge rule.

    :param rule_name: Rule name.
    :param event_bus_name: Bus the rule belongs to. ``None`` means the ``default`` bus.
    :param region: AWS region.
    :param role_arn: IAM role ARN for cross-account access.
    :param session: Pre-configured ``boto3.Session``.
    """

    def __init__(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self, rule_name, event_bus_name=DEFAULT_EVENT_BUS_NAME, region=None, role_arn=None, session=None
    ):
        super().__init__(rule_name, "events", region=region, role_arn=role_arn, session=session)
        self._event_bus_name = event_bus_name or DEFAULT_EVENT_BUS_NAME

    @classmethod
    def from_id(cls, resource_id, region=None, role_arn=None, session=None) -> EventBridgeRule:
        """Build the wrapper from a stored rule ID.

        :raises MalformedIDError: If ``resource_id`` can't be parsed.
        """
        event_bus_name, rule_name = rule_parse_id(resource_id)
        return cls(rule_name, event_bus_name=event_bus_name, region=region, role_arn=role_arn, session=session)

    @property
    def rule_name(self) -> str:
        """Rule name, without the bus."""
        return self._resource_id

    @property
    def event_bus_name(self) -> str:
        """Bus the rule belongs to."""
        return self._event_bus_name

    @property
    def resource_id(self) -> str:
        """Rule ID: the bare rule name on the default bus, ``bus/rule`` otherwise."""
        return rule_create_id(self._event_bus_name, self._resource_id)

    @property
    def _rule_kwargs(self) -> dict:
        return {"EventBusName": self._event_bus_name}

    @property
    def exists(self) -> bool:
        """Return ``True`` if ``DescribeRule`` finds the rule on its bus."""
        try:
            self._client.describe_rule(Name=self._resource_id, **self._rule_kwargs)
        except ClientError as err:
            if error_code(err) == _NOT_FOUND_CODE:
                return False
            raise
        return True

    @property
    def target_ids(self) -> list[str]:
        """Return state IDs of the targets attached to the rule."""
        return [
            target_create_id(self._event_bus_name, self._resource_id, target["Id"])
            for targets in self._target_pages()
            for target in targets
        ]

    def delete(self) -> None:
        """Detach every target, then delete the rule.

        Idempotent -- does nothing if the rule does not exist.
        """
        try:
            for targets in self._target_pages():
                self._detach(targets)
            self._client.delete_rule(Name=self._resource_id, **self._rule_kwargs)
        except ClientError as err:
            if error_code(err) != _NOT_FOUND_CODE:
                raise
            LOG.info("EventBridge rule %s does not exist.", self.resource_id)
            return
        LOG.info("Deleted EventBridge rule %s", self.resource_id)

    def _target_pages(self):
        """Yield non-empty pages of ``ListTargetsByRule`` targets."""
        paginator = self._client.get_paginator("list_targets_by_rule")
        for page in paginator.paginate(Rule=self._resource_id, **self._rule_kwargs):
            targets = page.get("Targets", [])
            if targets:
                yield targets

    def _detach(self, targets) -> None:
        ids = [target["Id"] for target in targets]
        self._client.remove_targets(Rule=self._resource_id, Ids=ids, **self._rule_kwargs)
        LOG.debug("Detached %s from rule %s", ", ".join(ids), self.resource_id)
