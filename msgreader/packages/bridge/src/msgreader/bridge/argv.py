"""启动参数扫描 -- 命令行 / "打开方式" 传入的文件

过滤 macOS 启动时附带的 -NS* / -Apple* / -psn_* 参数（后跟非参数值时一并跳过），
只保留存在的普通文件并解析为绝对路径，找不到时再相对工作目录重试一次。
"""

from collections.abc import Sequence
from pathlib import Path

import structlog

log = structlog.get_logger()

_SYSTEM_FLAG_PREFIXES = ("-NS", "-Apple", "-psn_")


def _resolve_file(candidate: Path) -> Path | None:
    if candidate.is_file():
        return candidate.resolve()
    return None


def scan_startup_args(args: Sequence[str], cwd: str | Path | None = None) -> list[str]:
    """从命令行参数中提取待打开文件

    Args:
        args: 不含程序名的参数列表
        cwd: 相对路径重试使用的工作目录，默认当前目录

    Returns:
        绝对路径列表，保持参数顺序
    """
    base = Path(cwd) if cwd is not None else Path.cwd()
    files: list[str] = []

    i = 0
    while i < len(args):
        arg = args[i]
        i += 1
        if arg.startswith(_SYSTEM_FLAG_PREFIXES):
            if i < len(args) and not args[i].startswith("-"):
                i += 1
            continue

        resolved = _resolve_file(Path(arg))
        if resolved is None and not Path(arg).is_absolute():
            resolved = _resolve_file(base / arg)

        if resolved is None:
            log.info("startup_arg_skipped", arg=arg)
            continue
        files.append(str(resolved))

    log.info("startup_files_scanned", count=len(files))
    return files
