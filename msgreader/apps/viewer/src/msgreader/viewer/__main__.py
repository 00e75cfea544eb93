"""命令行入口：python -m msgreader.viewer [files...]"""

import os
import sys

import uvicorn
from msgreader.bridge import scan_startup_args

from .main import create_app


def main(argv: list[str] | None = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    startup_files = scan_startup_args(args)
    uvicorn.run(
        create_app(startup_files),
        host=os.environ.get("MSGREADER_HOST", "127.0.0.1"),
        port=int(os.environ.get("MSGREADER_PORT", "8765")),
        log_config=None,
    )


if __name__ == "__main__":
    main()
