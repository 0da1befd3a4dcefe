"""
Provider-level tag configuration.

``default_tags`` are merged under every resource's own tags;
``ignore_tags`` hides tags managed outside of the provider.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DefaultTagsConfig:
    """Tags applied to every resource that supports tagging.

    :param tags: Provider-level tags.
    """

    tags: dict = field(default_factory=dict)

    def merge_tags(self, resource_tags) -> dict:
        """Return the default tags overridden by ``resource_tags``."""
        merged = dict(self.tags)
        merged.update(resource_tags or {})
        return merged

    def tags_equal(self, resource_tags) -> bool:
        """Return ``True`` if ``resource_tags`` are identical to the default tags.

        Identical tags can't be told apart after a read, so a resource that
        repeats the defaults verbatim would never converge.
        """
        if not self.tags:
            return False
        return dict(resource_tags or {}) == self.tags


@dataclass(frozen=True)
class IgnoreTagsConfig:
    """Tags the provider never reads or writes.

    :param keys: Exact tag keys to ignore.
    :param key_prefixes: Tag key prefixes to ignore.
    """

    keys: frozenset = frozenset()
    key_prefixes: tuple = ()

    def is_ignored(self, key) -> bool:
        """Return ``True`` if the tag ``key`` is ignored."""
        return key in self.keys or any(key.startswith(prefix) for prefix in self.key_prefixes)

    def ignore(self, tags) -> dict:
        """Return ``tags`` without the ignored ones."""
        return {key: value for key, value in (tags or {}).items() if not self.is_ignored(key)}


def tags_to_dict(tags) -> dict:
    """Convert an AWS ``[{"Key": ..., "Value": ...}]`` list to a dict."""
    return {tag["Key"]: tag["Value"] for tag in tags or []}


def dict_to_tags(tags) -> list[dict]:
    """Convert a dict to the AWS ``[{"Key": ..., "Value": ...}]`` list, sorted by key."""
    return [{"Key": key, "Value": value} for key, value in sorted((tags or {}).items())]
