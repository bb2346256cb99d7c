"""
Board mutation pipeline.

Validates create/update/delete requests, writes them to the store and fans
the result out to every session. Update and delete broadcast even when the
target id does not exist; clients must tolerate patches for unknown items.
"""

from typing import Any

from ..error_types import ErrorMessages
from ..exceptions import ErrorContext, ValidationError
from ..models.board_item import BoardColumn
from ..persistence.protocols import ChatStoreProtocol
from ..schemas.websocket_messages import (
    CreateBoardItemPayload,
    DeleteBoardItemPayload,
    UpdateBoardItemPayload,
)
from ..structured_logging.enhanced_logging_config import get_logger
from ..utils.sanitization import DEFAULT_MAX_LENGTH, sanitize_input
from ..utils.time_utils import format_timestamp, utc_now
from .message_broadcaster import BroadcastFanout

logger = get_logger(__name__)

PATCHABLE_FIELDS = ("title", "content", "column_name", "assigned_to")


def _optional_username(value: Any) -> str | None:
    cleaned = sanitize_input(value, max_length=DEFAULT_MAX_LENGTH)
    return cleaned or None


class BoardMutationPipeline:
    """Applies board operations for an authenticated identity."""

    def __init__(
        self,
        store: ChatStoreProtocol,
        fanout: BroadcastFanout,
        max_length: int = DEFAULT_MAX_LENGTH,
    ) -> None:
        self._store = store
        self._fanout = fanout
        self._max_length = max_length

    async def create(self, identity: str, payload: CreateBoardItemPayload) -> dict[str, Any]:
        """
        Create an item and broadcast ``board_item_created`` with the full record.

        Raises:
            ValidationError: If the sanitized title is empty
            DatabaseError: If the store rejects the insert
        """
        title = sanitize_input(payload.title, self._max_length)
        if not title:
            raise ValidationError(
                "Board item title is empty",
                context=ErrorContext(username=identity, event_type="create_board_item"),
                field="title",
                user_friendly=ErrorMessages.TITLE_REQUIRED,
            )

        item = await self._store.insert_board_item(
            title=title,
            content=sanitize_input(payload.content, self._max_length),
            username=identity,
            assigned_to=_optional_username(payload.assigned_to),
            column_name=payload.column or BoardColumn.TODO.value,
            timestamp=utc_now(),
        )
        self._fanout.publish("board_item_created", item)
        logger.info("Board item created", username=identity, item_id=item["id"], column=item["column_name"])
        return item

    async def update(self, identity: str, payload: UpdateBoardItemPayload) -> dict[str, Any]:
        """
        Apply a partial update and broadcast ``board_item_updated``.

        Only fields the client actually sent are written and broadcast, along
        with ``id`` and the refreshed ``updated_at``.

        Raises:
            ValidationError: If a title was sent but sanitizes to nothing
            DatabaseError: If the store rejects the update
        """
        sent = payload.model_fields_set
        patch: dict[str, Any] = {}

        if "title" in sent:
            title = sanitize_input(payload.title, self._max_length)
            if not title:
                raise ValidationError(
                    "Board item title is empty",
                    context=ErrorContext(username=identity, event_type="update_board_item"),
                    field="title",
                    user_friendly=ErrorMessages.TITLE_REQUIRED,
                )
            patch["title"] = title
        if "content" in sent:
            patch["content"] = sanitize_input(payload.content, self._max_length)
        # An explicit null column is ignored; column_name is never empty
        if "column_name" in sent and payload.column_name is not None:
            patch["column_name"] = payload.column_name
        if "assigned_to" in sent:
            patch["assigned_to"] = _optional_username(payload.assigned_to)

        updated_at = utc_now()
        found = await self._store.update_board_item(payload.id, {**patch, "updated_at": updated_at})
        if not found:
            logger.info("Board update for unknown item broadcast anyway", username=identity, item_id=payload.id)

        event = {"id": payload.id, **patch, "updated_at": format_timestamp(updated_at)}
        self._fanout.publish("board_item_updated", event)
        logger.info("Board item updated", username=identity, item_id=payload.id, fields=sorted(patch))
        return event

    async def delete(self, identity: str, payload: DeleteBoardItemPayload) -> dict[str, Any]:
        """Delete an item and broadcast ``board_item_deleted`` whether or not it existed."""
        found = await self._store.delete_board_item(payload.id)
        event = {"id": payload.id}
        self._fanout.publish("board_item_deleted", event)
        logger.info("Board item deleted", username=identity, item_id=payload.id, existed=found)
        return event
