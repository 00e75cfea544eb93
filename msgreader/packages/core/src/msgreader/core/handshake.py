"""ReadinessHandshake -- UI 与宿主之间的就绪协商

流程：
1. STARTING -> SIGNALING_READY，立即发出"前端已就绪"通知
2. 下一个调度点再次发出
3. 固定延迟后第三次发出（有界，不无限重试）
宿主首次确认或 UI 自行判定就绪（以先到者为准）时进入 READY，之后的通知均为空操作。
宿主确认只是建议性的：没有确认时，本地初始化完成后仍会进入 READY。
"""

import asyncio
from collections.abc import Callable

import structlog

from .config import READY_RETRY_DELAY_S, READY_SIGNAL_ATTEMPTS
from .exceptions import InvalidHandshakeTransitionError
from .models.enums import HandshakeState, ReadyReason, validate_transition
from .protocols import HostBridge

log = structlog.get_logger()

ReadyCallback = Callable[[], None]


class ReadinessHandshake:
    """就绪握手状态机 -- 进程内唯一实例，由 AppContext 持有"""

    def __init__(
        self,
        bridge: HostBridge | None,
        *,
        attempts: int = READY_SIGNAL_ATTEMPTS,
        retry_delay_s: float = READY_RETRY_DELAY_S,
    ) -> None:
        """
        Args:
            bridge: 宿主桥，None 表示没有宿主（信号直接跳过）
            attempts: 就绪信号总次数
            retry_delay_s: 最后一次信号前的固定延迟（秒）
        """
        self._bridge = bridge
        self._attempts = max(1, attempts)
        self._retry_delay_s = retry_delay_s
        self._state = HandshakeState.STARTING
        self._ready_reason: ReadyReason | None = None
        self._ready_event = asyncio.Event()
        self._observers: list[ReadyCallback] = []
        self._signals_sent = 0

    @property
    def state(self) -> HandshakeState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state == HandshakeState.READY

    @property
    def ready_reason(self) -> ReadyReason | None:
        return self._ready_reason

    @property
    def signals_sent(self) -> int:
        return self._signals_sent

    def on_ready(self, callback: ReadyCallback) -> None:
        """注册就绪观察者（每个会话只触发一次）

        已经 READY 时立即调用，避免晚注册的观察者错过唯一的完成事件。
        """
        if self.is_ready:
            self._invoke(callback)
            return
        self._observers.append(callback)

    async def start(self) -> None:
        """按有界重试策略发出就绪信号，已就绪时提前结束"""
        for attempt in range(1, self._attempts + 1):
            if self.is_ready:
                break
            if attempt == 2:
                # 让出一次事件循环，相当于等待下一个渲染/布局时机
                await asyncio.sleep(0)
            elif attempt > 2:
                await asyncio.sleep(self._retry_delay_s)
            if self.is_ready:
                break
            await self.signal_ready()

        if not self.is_ready:
            log.info(
                "ready_signals_exhausted",
                attempts=self._attempts,
                state=self._state.value,
            )

    async def signal_ready(self) -> None:
        """向宿主发出一次"前端已就绪"通知；幂等，READY 后为空操作"""
        if self.is_ready:
            log.debug("ready_signal_skipped", state=self._state.value)
            return

        if self._state != HandshakeState.SIGNALING_READY:
            self._transition(HandshakeState.SIGNALING_READY)

        self._signals_sent += 1
        if self._bridge is None:
            log.warning("host_bridge_unavailable", signal=self._signals_sent)
        else:
            try:
                await self._bridge.notify_frontend_ready()
                log.info("frontend_ready_signal_sent", signal=self._signals_sent)
            except Exception as e:
                # 信号失败不致命，依赖后续重试或本地初始化完成
                log.warning(
                    "frontend_ready_signal_failed",
                    signal=self._signals_sent,
                    error_type=type(e).__name__,
                    error=str(e),
                )

        # 等待期间确认可能已经到达
        if self._state == HandshakeState.SIGNALING_READY:
            self._transition(HandshakeState.AWAITING_ACK)

    def acknowledge(self) -> bool:
        """宿主确认就绪；返回 True 表示本次调用触发了进入 READY"""
        return self._become_ready(ReadyReason.HOST_ACK)

    def mark_ready(self, reason: ReadyReason = ReadyReason.LOCAL_INIT) -> bool:
        """UI 自行判定就绪（本地初始化完成、强制打开等）"""
        return self._become_ready(reason)

    async def wait_ready(self, timeout: float | None = None) -> bool:
        """等待唯一的完成事件

        Returns:
            True 如果在超时前进入 READY
        """
        try:
            await asyncio.wait_for(self._ready_event.wait(), timeout=timeout)
        except TimeoutError:
            return False
        return True

    def _become_ready(self, reason: ReadyReason) -> bool:
        # 检查与设置在同一个同步步骤内完成，不会有两个通知同时越过 READY
        if self.is_ready:
            log.debug(
                "ready_notification_ignored",
                reason=reason.value,
                ready_reason=self._ready_reason.value if self._ready_reason else None,
            )
            return False

        self._transition(HandshakeState.READY)
        self._ready_reason = reason
        self._ready_event.set()
        log.info("handshake_ready", reason=reason.value, signals_sent=self._signals_sent)

        observers, self._observers = self._observers, []
        for callback in observers:
            self._invoke(callback)
        return True

    def _transition(self, to_state: HandshakeState) -> None:
        if not validate_transition(self._state, to_state):
            raise InvalidHandshakeTransitionError(
                f"Cannot transition from {self._state} to {to_state}"
            )
        log.debug(
            "handshake_transition",
            from_state=self._state.value,
            to_state=to_state.value,
        )
        self._state = to_state

    @staticmethod
    def _invoke(callback: ReadyCallback) -> None:
        try:
            callback()
        except Exception as e:
            log.error(
                "ready_observer_failed",
                callback=getattr(callback, "__qualname__", repr(callback)),
                error_type=type(e).__name__,
                error=str(e),
            )
