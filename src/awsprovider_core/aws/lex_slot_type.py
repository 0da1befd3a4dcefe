"""
Lex slot type resource wrapper.

Lex answers ``ConflictException`` while a slot type is still being built
from a previous change, so ``put()`` and ``delete()`` retry the call.
Every ``PutSlotType`` call on an existing slot type must also carry the
checksum of its latest revision; a conflicting attempt picks the fresh
checksum up before the next try.
"""

from __future__ import annotations

from logging import getLogger

from botocore.exceptions import ClientError

from awsprovider_core.aws import error_code
from awsprovider_core.aws.base import AWSResource
from awsprovider_core.resource.exceptions import RetryableError
from awsprovider_core.resource.retry import retry

LOG = getLogger(__name__)

LATEST_VERSION = "$LATEST"

CREATE_TIMEOUT = 60
UPDATE_TIMEOUT = 60
DELETE_TIMEOUT = 5 * 60

VALUE_SELECTION_ORIGINAL_VALUE = "ORIGINAL_VALUE"
VALUE_SELECTION_TOP_RESOLUTION = "TOP_RESOLUTION"


class LexSlotType(AWSResource):
    """Wrapper around a Lex (V1) slot type.

    :param name: Name of the slot type.
    :param region: AWS region.
    :param role_arn: IAM role ARN for cross-account access.
    :param session: Pre-configured ``boto3.Session``.
    """

    def __init__(self, name, region=None, role_arn=None, session=None):
        super().__init__(name, "lex-models", region=region, role_arn=role_arn, session=session)

    @property
    def name(self) -> str:
        """Return the slot type name.

        :rtype: str
        """
        return self._resource_id

    def get(self, version=LATEST_VERSION) -> dict:
        """Return the ``GetSlotType`` response for ``version``."""
        return self._client.get_slot_type(name=self._resource_id, version=version)

    @property
    def checksum(self) -> str:
        """Checksum of the ``$LATEST`` revision."""
        return self.get()["checksum"]

    @property
    def exists(self) -> bool:
        """Return ``True`` if the slot type exists.

        Returns ``False`` if the API raises ``NotFoundException``.
        """
        try:
            self.get()
            return True
        except ClientError as err:
            if error_code(err) == "NotFoundException":
                return False
            raise

    # -- Put -----------------------------------------------------------------

    def put(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        enumeration_values=None,
        description=None,
        value_selection_strategy=VALUE_SELECTION_ORIGINAL_VALUE,
        checksum=None,
        create_version=False,
        timeout=None,
    ) -> dict:
        """Create or update the slot type.

        :param enumeration_values: List of ``{"value": ..., "synonyms": [...]}``.
        :param checksum: Checksum of the revision being updated. ``None`` on create.
        :param create_version: Publish a new numbered version.
        :param timeout: Retry budget in seconds. Defaults to
            :data:`CREATE_TIMEOUT` or :data:`UPDATE_TIMEOUT`.
        :return: The ``PutSlotType`` response.
        """
        request = {
            "name": self._resource_id,
            "valueSelectionStrategy": value_selection_strategy,
            "createVersion": create_version,
        }
        if description:
            request["description"] = description
        if enumeration_values:
            request["enumerationValues"] = enumeration_values
        if checksum:
            request["checksum"] = checksum

        def _put():
            try:
                return self._client.put_slot_type(**request)
            except ClientError as err:
                if error_code(err) == "ConflictException":
                    fresh_checksum = err.response.get("checksum")
                    if fresh_checksum:
                        request["checksum"] = fresh_checksum
                    raise RetryableError(err) from err
                raise

        if timeout is None:
            timeout = UPDATE_TIMEOUT if checksum else CREATE_TIMEOUT
        response = retry(timeout, _put)
        LOG.info("Put Lex slot type %s (version %s)", self._resource_id, response.get("version"))
        return response

    # -- Delete --------------------------------------------------------------

    def delete(self, timeout=DELETE_TIMEOUT) -> None:
        """Delete the slot type and all its versions.

        Idempotent -- does nothing if the slot type does not exist.
        """

        def _delete():
            try:
                self._client.delete_slot_type(name=self._resource_id)
            except ClientError as err:
                if error_code(err) == "ConflictException":
                    raise RetryableError(err) from err
                raise

        try:
            retry(timeout, _delete)
            LOG.info("Deleted Lex slot type %s", self._resource_id)
        except ClientError as err:
            if error_code(err) == "NotFoundException":
                LOG.info("Lex slot type %s does not exist.", self._resource_id)
            else:
                raise
