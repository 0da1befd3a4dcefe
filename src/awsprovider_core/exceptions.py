"""Top level exceptions.

The exception hierarchy repeats the structure of the awsprovider_core package.
Each subpackage has its own exceptions.py module.
The subpackage exceptions are inherited from the upper module exceptions.
"""


class AWSProviderException(Exception):
    """Generic AWS provider exception"""


class MalformedIDError(AWSProviderException, ValueError):
    """A composite resource identifier can't be parsed.

    :param resource_id: The offending identifier.
    :param expected: Human readable shape of a valid identifier.
    """

    def __init__(self, resource_id, expected):
        self.resource_id = resource_id
        self.expected = expected
        super().__init__(f"unexpected format for ID ({resource_id}), expected {expected}")
