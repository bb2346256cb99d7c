"""
Pydantic schemas for inbound WebSocket events.

Every client frame is ``{"type": <kind>, "data": {...}}``. The kinds form a
closed union discriminated on ``type``; a frame naming any other kind fails
validation instead of being silently ignored.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

ColumnName = Literal["todo", "inprogress", "done"]


class EventPayload(BaseModel):
    """Base class for event payloads; unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")


class AuthenticatePayload(EventPayload):
    token: Any = None


class SendMessagePayload(EventPayload):
    content: Any = None


class PingLatencyPayload(EventPayload):
    ts: Any = None


class CreateBoardItemPayload(EventPayload):
    title: Any = None
    content: Any = None
    column: ColumnName | None = None
    assigned_to: str | None = None


class UpdateBoardItemPayload(EventPayload):
    """Partial update; ``model_fields_set`` tells which fields the client sent."""

    id: int
    title: Any = None
    content: Any = None
    column_name: ColumnName | None = None
    assigned_to: str | None = None


class DeleteBoardItemPayload(EventPayload):
    id: int


class AuthenticateEvent(BaseModel):
    type: Literal["authenticate"]
    data: AuthenticatePayload = Field(default_factory=AuthenticatePayload)


class SendMessageEvent(BaseModel):
    type: Literal["send_message"]
    data: SendMessagePayload = Field(default_factory=SendMessagePayload)


class GetMonitoringEvent(BaseModel):
    type: Literal["get_monitoring"]
    data: EventPayload = Field(default_factory=EventPayload)


class PingLatencyEvent(BaseModel):
    type: Literal["ping_latency"]
    data: PingLatencyPayload = Field(default_factory=PingLatencyPayload)


class GetConnectedUsersEvent(BaseModel):
    type: Literal["get_connected_users"]
    data: EventPayload = Field(default_factory=EventPayload)


class GetBoardItemsEvent(BaseModel):
    type: Literal["get_board_items"]
    data: EventPayload = Field(default_factory=EventPayload)


class CreateBoardItemEvent(BaseModel):
    type: Literal["create_board_item"]
    data: CreateBoardItemPayload = Field(default_factory=CreateBoardItemPayload)


class UpdateBoardItemEvent(BaseModel):
    type: Literal["update_board_item"]
    data: UpdateBoardItemPayload


class DeleteBoardItemEvent(BaseModel):
    type: Literal["delete_board_item"]
    data: DeleteBoardItemPayload


InboundEvent = Annotated[
    AuthenticateEvent
    | SendMessageEvent
    | GetMonitoringEvent
    | PingLatencyEvent
    | GetConnectedUsersEvent
    | GetBoardItemsEvent
    | CreateBoardItemEvent
    | UpdateBoardItemEvent
    | DeleteBoardItemEvent,
    Field(discriminator="type"),
]

INBOUND_EVENT_TYPES: tuple[type[BaseModel], ...] = (
    AuthenticateEvent,
    SendMessageEvent,
    GetMonitoringEvent,
    PingLatencyEvent,
    GetConnectedUsersEvent,
    GetBoardItemsEvent,
    CreateBoardItemEvent,
    UpdateBoardItemEvent,
    DeleteBoardItemEvent,
)

inbound_event_adapter: TypeAdapter[Any] = TypeAdapter(InboundEvent)
