#!/usr/bin/env python3
"""
Capture the output of a chatty child process.

This example demonstrates:
- Starting a child with get_builder()
- Waiting with wait_for() while both channels are drained
- Treating a non-zero exit as an error with wait_for_successful_completion()

The child writes several megabytes to stdout and stderr, far more than an OS
pipe buffer holds, so a plain Popen.wait() would hang here.

Usage:
    python capture_output.py
"""

import pathlib
import sys

# Add the project root to the path
project_root = str(pathlib.Path(__file__).resolve().parents[2])
sys.path.append(project_root) if project_root not in sys.path else None

from procinfra import (
    ProcessFailedError,
    get_builder,
    wait_for,
    wait_for_successful_completion,
)
from procinfra.log import create_lg

CHATTY_CHILD = """
import sys
for i in range(50000):
    print(f"out {i} " + "x" * 80)
    print(f"err {i} " + "y" * 80, file=sys.stderr)
"""


def main() -> int:
    lg = create_lg("procinfra", "debug")

    proc = get_builder(sys.executable, "-c", CHATTY_CHILD).start()
    result = wait_for(proc)
    lg.info(
        "captured",
        extra={
            "exit_code": result.exit_code,
            "stdout_lines": len(result.stdout),
            "stderr_lines": len(result.stderr),
        },
    )

    failing = get_builder(
        sys.executable, "-c", "import sys; print('boom', file=sys.stderr); sys.exit(1)"
    ).start()
    try:
        wait_for_successful_completion(failing)
    except ProcessFailedError as e:
        lg.info("child failed as expected", extra={"error": str(e)})

    return 0


if __name__ == "__main__":
    sys.exit(main())
