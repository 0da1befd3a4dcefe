"""
Composite identifier schemes of individual AWS resources.

Most schemes are plain :class:`~awsprovider_core.ids.ResourceIDCodec` instances.
EventBridge identifiers need more care: a bus name may be omitted for the
``default`` bus, and partner event bus names contain the ``/`` separator
themselves, so they are told apart with :data:`PARTNER_EVENT_BUS_PATTERN`.
EventBridge target state IDs use ``-``, which is legal in both rule names and
target IDs; they can be created but not parsed. Imports use the ``/`` form.
"""

from __future__ import annotations

import re

from awsprovider_core.exceptions import MalformedIDError
from awsprovider_core.ids import ResourceIDCodec

# Amplify
AMPLIFY_BACKEND_ENVIRONMENT_ID = ResourceIDCodec("/", "APPID", "ENVIRONMENTNAME")
AMPLIFY_BRANCH_ID = ResourceIDCodec("/", "APPID", "BRANCHNAME", greedy=True)
AMPLIFY_DOMAIN_ASSOCIATION_ID = ResourceIDCodec("/", "APPID", "DOMAINNAME")

# Budgets
BUDGET_ID = ResourceIDCodec(":", "AccountID", "BudgetName")
BUDGET_ACTION_ID = ResourceIDCodec(":", "AccountID", "ActionID", "BudgetName")

# EKS
EKS_ADDON_ID = ResourceIDCodec(":", "cluster-name", "addon-name")
EKS_FARGATE_PROFILE_ID = ResourceIDCodec(":", "cluster-name", "fargate-profile-name")
EKS_IDENTITY_PROVIDER_CONFIG_ID = ResourceIDCodec(":", "cluster-name", "config-name")
EKS_NODE_GROUP_ID = ResourceIDCodec(":", "cluster-name", "node-group-name")

# Route 53
ROUTE53_KEY_SIGNING_KEY_ID = ResourceIDCodec(",", "hosted-zone-id", "name")

# EventBridge Schemas
SCHEMA_ID = ResourceIDCodec("/", "SCHEMA_NAME", "REGISTRY_NAME")


def directconnect_gateway_association_id(directconnect_gateway_id, associated_gateway_id) -> str:
    """Return the state ID of a Direct Connect gateway association.

    The ID is never parsed; reads look the association up by its two
    gateway IDs instead.
    """
    return f"ga-{directconnect_gateway_id}{associated_gateway_id}"


# -- EventBridge -------------------------------------------------------------

DEFAULT_EVENT_BUS_NAME = "default"

PARTNER_EVENT_BUS_PATTERN = re.compile(r"^aws\.partner(/[\.\-_A-Za-z0-9]+){2,}$")

_EVENTBRIDGE_SEPARATOR = "/"
_TARGET_ID_SEPARATOR = "-"


def _bus_scoped_id(event_bus_name, name, partner_bus_allowed=False) -> str:
    """Join a bus and a name so that the matching parser gets them back.

    :raises ValueError: If ``name`` is empty or contains ``/``, or if
        ``event_bus_name`` contains ``/`` and isn't an accepted partner bus.
    """
    if not name:
        raise ValueError("name must not be empty")
    if _EVENTBRIDGE_SEPARATOR in name:
        raise ValueError(f"name must not contain {_EVENTBRIDGE_SEPARATOR!r}: {name}")
    if not event_bus_name or event_bus_name == DEFAULT_EVENT_BUS_NAME:
        return name
    if _EVENTBRIDGE_SEPARATOR in event_bus_name and not (
        partner_bus_allowed and PARTNER_EVENT_BUS_PATTERN.match(event_bus_name)
    ):
        raise ValueError(f"event bus name must not contain {_EVENTBRIDGE_SEPARATOR!r}: {event_bus_name}")
    return f"{event_bus_name}{_EVENTBRIDGE_SEPARATOR}{name}"


def permission_create_id(event_bus_name, statement_id) -> str:
    """Return the ID of an event bus permission; the bus is omitted for the default bus.

    Permission IDs have at most two parts, so partner buses aren't accepted.
    """
    return _bus_scoped_id(event_bus_name, statement_id)


def permission_parse_id(resource_id) -> tuple[str, str]:
    """Parse an event bus permission ID.

    :return: ``(event_bus_name, statement_id)``.
    :raises MalformedIDError: If the ID doesn't have one or two non-empty parts.
    """
    parts = resource_id.split(_EVENTBRIDGE_SEPARATOR)
    if len(parts) == 1 and parts[0]:
        return DEFAULT_EVENT_BUS_NAME, parts[0]
    if len(parts) == 2 and all(parts):
        return parts[0], parts[1]
    raise MalformedIDError(resource_id, "<event-bus-name>/<statement-id> or <statement-id>")


def rule_create_id(event_bus_name, rule_name) -> str:
    """Return the ID of a rule; the bus is omitted for the default bus."""
    return _bus_scoped_id(event_bus_name, rule_name, partner_bus_allowed=True)


def rule_parse_id(resource_id) -> tuple[str, str]:
    """Parse a rule ID.

    An ID with more than two parts is accepted only when everything before
    the last ``/`` is a partner event bus name.

    :return: ``(event_bus_name, rule_name)``.
    :raises MalformedIDError: If the ID can't be split unambiguously.
    """
    parts = resource_id.split(_EVENTBRIDGE_SEPARATOR)
    if len(parts) == 1 and parts[0]:
        return DEFAULT_EVENT_BUS_NAME, parts[0]
    if len(parts) == 2 and all(parts):
        return parts[0], parts[1]
    if len(parts) > 2:
        bus_name, _, rule_name = resource_id.rpartition(_EVENTBRIDGE_SEPARATOR)
        if PARTNER_EVENT_BUS_PATTERN.match(bus_name) and rule_name:
            return bus_name, rule_name
    raise MalformedIDError(resource_id, "<event-bus-name>/<rule-name> or <rule-name>")


def target_create_id(event_bus_name, rule_name, target_id) -> str:
    """Return the state ID of a rule target.

    :raises ValueError: If ``rule_name`` or ``target_id`` is empty.
    """
    if not rule_name:
        raise ValueError("rule name must not be empty")
    if not target_id:
        raise ValueError("target ID must not be empty")
    resource_id = f"{rule_name}{_TARGET_ID_SEPARATOR}{target_id}"
    if event_bus_name and event_bus_name != DEFAULT_EVENT_BUS_NAME:
        resource_id = f"{event_bus_name}{_TARGET_ID_SEPARATOR}{resource_id}"
    return resource_id


def target_parse_import_id(resource_id) -> tuple[str, str, str]:
    """Parse a rule target import ID.

    :return: ``(event_bus_name, rule_name, target_id)``.
    :raises MalformedIDError: If the ID can't be split unambiguously.
    """
    parts = resource_id.split(_EVENTBRIDGE_SEPARATOR)
    if len(parts) == 2 and all(parts):
        return DEFAULT_EVENT_BUS_NAME, parts[0], parts[1]
    if len(parts) == 3 and all(parts):
        return parts[0], parts[1], parts[2]
    if len(parts) > 3:
        head, _, target_id = resource_id.rpartition(_EVENTBRIDGE_SEPARATOR)
        bus_name, _, rule_name = head.rpartition(_EVENTBRIDGE_SEPARATOR)
        if PARTNER_EVENT_BUS_PATTERN.match(bus_name) and rule_name and target_id:
            return bus_name, rule_name, target_id
    raise MalformedIDError(
        resource_id,
        "<event-bus-name>/<rule-name>/<target-id> or <rule-name>/<target-id>",
    )
