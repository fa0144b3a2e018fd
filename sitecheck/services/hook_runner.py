import logging
import shlex
import subprocess
import sys
from typing import Optional, TextIO

from sitecheck.exceptions import HookExecutionError

logger = logging.getLogger(__name__)


class HookRunner:
    """Run a pre/post crawl command, echoing its standard output."""

    def __init__(self, output: Optional[TextIO] = None, log: Optional[logging.Logger] = None):
        self.output = output
        self.logger = log or logger

    def run(self, command_line: str) -> None:
        """Run `command_line`; raises HookExecutionError if it cannot start or fails."""
        self.logger.info("Running '%s'...", command_line)
        try:
            args = shlex.split(command_line)
        except ValueError as e:
            raise HookExecutionError(command_line, f"could not be parsed: {e}") from e
        if not args:
            raise HookExecutionError(command_line, "is empty")

        out = self.output or sys.stdout
        try:
            proc = subprocess.Popen(args, stdout=subprocess.PIPE, text=True)
        except OSError as e:
            self.logger.error("Failed to start command: %s", e)
            raise HookExecutionError(command_line, f"failed to start: {e}") from e

        with proc:
            for line in proc.stdout:
                out.write(line)
        if proc.returncode != 0:
            self.logger.error("Command '%s' exited with status %s", command_line, proc.returncode)
            raise HookExecutionError(command_line, f"exited with status {proc.returncode}")
