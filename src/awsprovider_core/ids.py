"""
Composite resource identifiers.

Resources addressed by more than one key (an Amplify branch needs the app ID
and the branch name) are stored under a single string that joins the keys
with a separator. The string is created once and parsed back on every read,
update and delete.

.. code-block:: python

    BRANCH_ID = ResourceIDCodec("/", "APPID", "BRANCHNAME", greedy=True)

    BRANCH_ID.create("app-123", "main")   # "app-123/main"
    BRANCH_ID.parse("app-123/main")       # ("app-123", "main")
    BRANCH_ID.parse("app-123")            # MalformedIDError

Parsing either returns exactly the original parts or raises
:class:`~awsprovider_core.exceptions.MalformedIDError`.
"""

from __future__ import annotations

from urllib.parse import unquote

from awsprovider_core.exceptions import MalformedIDError


class ResourceIDCodec:
    """Join and split identifiers made of a fixed number of parts.

    :param separator: String placed between parts.
    :param part_names: Names of the parts, used in error messages.
        At least two are required.
    :param greedy: If ``True`` the last part may contain the separator;
        the identifier is split at the first ``len(part_names) - 1``
        separators only.
    """

    def __init__(self, separator: str, *part_names: str, greedy: bool = False):
        if not separator:
            raise ValueError("separator must not be empty")
        if len(part_names) < 2:
            raise ValueError("a composite ID needs at least two parts")
        self._separator = separator
        self._part_names = part_names
        self._greedy = greedy

    @property
    def separator(self) -> str:
        """Separator between parts."""
        return self._separator

    @property
    def expected(self) -> str:
        """Shape of a valid identifier, e.g. ``APPID/BRANCHNAME``."""
        return self._separator.join(self._part_names)

    def create(self, *parts: str) -> str:
        """Join ``parts`` into an identifier.

        :raises ValueError: On a wrong number of parts, an empty part or a
            part containing the separator.
        """
        self._check_parts(parts)
        return self._separator.join(self._encode(part) for part in parts)

    def parse(self, resource_id: str) -> tuple[str, ...]:
        """Split ``resource_id`` into its parts.

        :raises MalformedIDError: If the identifier doesn't have exactly
            the expected number of non-empty parts, or contains an escape
            sequence :meth:`create` doesn't produce.
        """
        if self._greedy:
            parts = resource_id.split(self._separator, len(self._part_names) - 1)
        else:
            parts = resource_id.split(self._separator)
        if len(parts) != len(self._part_names) or not all(parts):
            raise MalformedIDError(resource_id, self.expected)
        decoded = tuple(self._decode(part) for part in parts)
        # Only identifiers create() could have produced are accepted.
        if any(self._encode(value) != part for value, part in zip(decoded, parts)):
            raise MalformedIDError(resource_id, self.expected)
        return decoded

    def _check_parts(self, parts):
        if len(parts) != len(self._part_names):
            raise ValueError(f"expected {len(self._part_names)} parts ({self.expected}), got {len(parts)}")
        last = len(parts) - 1
        for index, (name, part) in enumerate(zip(self._part_names, parts)):
            if not part:
                raise ValueError(f"{name} must not be empty")
            if self._separator in self._encode(part) and not (self._greedy and index == last):
                raise ValueError(f"{name} must not contain {self._separator!r}")

    def _encode(self, part: str) -> str:
        return part

    def _decode(self, part: str) -> str:
        return part


class QuotedResourceIDCodec(ResourceIDCodec):
    """Unambiguous variant of :class:`ResourceIDCodec`.

    ``%`` and the separator are percent-escaped inside each part, so any
    non-empty string can be a part, separators included. Any other ``%``
    sequence is rejected on parse, so every part has exactly one encoding.
    """

    def __init__(self, separator: str, *part_names: str):
        if len(separator) != 1 or separator.isalnum() or separator == "%":
            raise ValueError(f"separator must be a single punctuation character other than '%', got {separator!r}")
        super().__init__(separator, *part_names)
        self._escaped_separator = "".join(f"%{byte:02X}" for byte in separator.encode("utf-8"))

    def _encode(self, part: str) -> str:
        return part.replace("%", "%25").replace(self._separator, self._escaped_separator)

    def _decode(self, part: str) -> str:
        return unquote(part)
