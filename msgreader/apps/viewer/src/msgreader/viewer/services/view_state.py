"""ViewState -- Presenter 实现

记录当前展示的消息 / 是否停留在欢迎页，并把每次变化广播为展示事件。
"""

from collections.abc import Sequence

import structlog
from msgreader.core.models import Message

from .view_hub import ViewEvent, ViewEventHub, ViewEventType

log = structlog.get_logger()


class ViewState:
    """展示状态"""

    def __init__(self, hub: ViewEventHub | None = None) -> None:
        self._hub = hub
        self.current_message_id: str | None = None
        self.message_count = 0

    @property
    def showing_welcome(self) -> bool:
        return self.current_message_id is None

    def message_list_changed(self, messages: Sequence[Message]) -> None:
        self.message_count = len(messages)
        self._publish(
            ViewEventType.MESSAGE_LIST_CHANGED,
            {
                "count": len(messages),
                "message_ids": [m.message_id for m in messages],
            },
        )

    def show_message(self, message: Message) -> None:
        self.current_message_id = message.message_id
        log.info("message_shown", message_id=message.message_id, name=message.display_name)
        self._publish(
            ViewEventType.MESSAGE_SHOWN,
            {
                "message_id": message.message_id,
                "display_name": message.display_name,
            },
        )

    def show_welcome(self) -> None:
        self.current_message_id = None
        self._publish(ViewEventType.WELCOME_SHOWN, {})

    def _publish(self, event_type: ViewEventType, payload: dict) -> None:
        if self._hub is not None:
            self._hub.publish(ViewEvent(type=event_type, payload=payload))
