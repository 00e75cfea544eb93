"""msgreader Bridge -- 宿主侧能力实现

packages/bridge 的公开接口导出。
"""

from .argv import scan_startup_args
from .config import BridgeConfig, load_bridge_config

# 异常
from .exceptions import BridgeError, FileTooLargeError, HostReadError
from .local_host import LocalHostBridge
from .parsers import default_parsers, parse_eml, parse_msg

__all__ = [
    "LocalHostBridge",
    "scan_startup_args",
    "BridgeConfig",
    "load_bridge_config",
    "default_parsers",
    "parse_eml",
    "parse_msg",
    "BridgeError",
    "HostReadError",
    "FileTooLargeError",
]
