"""枚举定义

包含 HandshakeState 状态机、IntakeSource、HostEventType、ReadyReason 枚举，
以及 VALID_TRANSITIONS 合法流转映射和 TERMINAL_STATES 终态集合。
"""

from enum import StrEnum


class HandshakeState(StrEnum):
    """就绪握手状态机

    单向流转，仅 SIGNALING_READY <-> AWAITING_ACK 之间允许重试往返。
    READY 为终态，进程生命周期内不再变化。
    """

    STARTING = "Starting"
    SIGNALING_READY = "SignalingReady"
    AWAITING_ACK = "AwaitingAck"
    READY = "Ready"


# 合法状态流转
VALID_TRANSITIONS: dict[HandshakeState, set[HandshakeState]] = {
    # 强制打开可能在信号发出前到达，允许直接进入 READY
    HandshakeState.STARTING: {HandshakeState.SIGNALING_READY, HandshakeState.READY},
    HandshakeState.SIGNALING_READY: {
        HandshakeState.AWAITING_ACK,
        HandshakeState.READY,
    },
    HandshakeState.AWAITING_ACK: {
        HandshakeState.SIGNALING_READY,
        HandshakeState.READY,
    },
    # 终态不可再流转
    HandshakeState.READY: set(),
}

TERMINAL_STATES: set[HandshakeState] = {HandshakeState.READY}


class IntakeSource(StrEnum):
    """文件请求来源标签"""

    DRAG_DROP = "drag-drop"
    STARTUP_SCAN = "startup-scan"
    LIVE_NOTIFICATION = "live-notification"
    FORCED_OPEN = "forced-open"


class HostEventType(StrEnum):
    """Host -> UI 通知类型（值与宿主事件名一致）"""

    FILES_READY = "files-to-open"
    FORCE_OPEN = "open-file-now"
    BACKEND_READY = "backend-ready"
    NEW_FILES_AVAILABLE = "new-files-available"


class ReadyReason(StrEnum):
    """进入 READY 的原因"""

    HOST_ACK = "host_ack"
    LOCAL_INIT = "local_init"
    FORCE_OPEN = "force_open"


def validate_transition(from_state: HandshakeState, to_state: HandshakeState) -> bool:
    """验证状态流转是否合法

    Args:
        from_state: 当前状态
        to_state: 目标状态

    Returns:
        True 如果流转合法，否则 False
    """
    allowed = VALID_TRANSITIONS.get(from_state, set())
    return to_state in allowed
