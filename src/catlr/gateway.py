"""External tool delegation, native fallbacks and output identity."""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import stat
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from catlr.config import Config

logger = logging.getLogger(__name__)

FALLBACK_FILE_COMMAND = "cat"
BAT_ARGS = ("--paging=never", "--style=full")


def _split(command: str) -> list[str]:
    try:
        return shlex.split(command)
    except ValueError:
        logger.debug("Cannot parse command: %r", command)
        return []


def command_exists(command: str) -> bool:
    """Return whether the first word of *command* is on ``PATH``.

    Args:
        command: Command line such as ``"lsd --tree"``.

    Returns:
        bool: ``True`` when the executable can be found.
    """
    argv = _split(command)
    return bool(argv) and shutil.which(argv[0]) is not None


@dataclass(frozen=True, slots=True)
class Tools:
    """External commands selected once per run.

    Attributes:
        tree_command: Tree-drawing command, or ``None`` for the built-in
            renderer.
        file_command: File-printing command, or ``None`` for the native
            byte copy.
    """

    tree_command: str | None = None
    file_command: str | None = None

    @classmethod
    def detect(cls, config: Config) -> Tools:
        """Resolve which configured commands are available.

        The file command falls back to ``cat`` when the configured one is
        missing, then to the native copy.
        """
        tree_command: str | None = None
        if command_exists(config.tree_command):
            tree_command = config.tree_command

        file_command: str | None = None
        if command_exists(config.file_command):
            file_command = config.file_command
        elif command_exists(FALLBACK_FILE_COMMAND):
            file_command = FALLBACK_FILE_COMMAND

        logger.debug("Selected tools: tree=%s file=%s", tree_command, file_command)
        return cls(tree_command=tree_command, file_command=file_command)


def file_command_argv(command: str, path: Path) -> list[str]:
    """Build the argument vector printing *path* with *command*."""
    argv = _split(command)
    if argv == ["bat"]:
        argv.extend(BAT_ARGS)
    return [*argv, str(path)]


def _fileno(stream: BinaryIO) -> int | None:
    try:
        return stream.fileno()
    except (AttributeError, OSError, ValueError):
        return None


def run_external(argv: list[str], out: BinaryIO) -> bool:
    """Run *argv* with its standard output going to *out*.

    *out* is flushed first so earlier report text precedes the tool's
    output. Streams without a file descriptor receive the captured output.

    Args:
        argv: Command and arguments.
        out: Binary report stream.

    Returns:
        bool: ``False`` when the command could not be started.
    """
    if not argv:
        return False
    out.flush()
    fileno = _fileno(out)
    try:
        if fileno is not None:
            result = subprocess.run(argv, stdout=fileno, check=False)
        else:
            result = subprocess.run(argv, stdout=subprocess.PIPE, check=False)
            out.write(result.stdout)
    except OSError as exc:
        logger.debug("Cannot run %s: %s", argv[0], exc)
        return False
    if result.returncode != 0:
        logger.debug("%s exited with status %d", argv[0], result.returncode)
    return True


def copy_native(path: Path, out: BinaryIO) -> None:
    """Stream the raw bytes of *path* to *out*.

    Raises:
        OSError: If the file cannot be opened or read.
    """
    with path.open("rb") as f:
        shutil.copyfileobj(f, out)


def print_file(path: Path, tools: Tools, out: BinaryIO) -> None:
    """Emit the content of *path*, delegating when a file command is set.

    Raises:
        OSError: If the native copy fails.
    """
    if tools.file_command:
        if run_external(file_command_argv(tools.file_command, path), out):
            return
    copy_native(path, out)


def print_tree_external(root: Path, tools: Tools, out: BinaryIO) -> bool:
    """Draw *root* with the external tree command.

    Returns:
        bool: ``False`` when no tree command is available or it failed to
        start, in which case the caller renders the tree itself.
    """
    if not tools.tree_command:
        return False
    return run_external([*_split(tools.tree_command), str(root)], out)


@dataclass(frozen=True, slots=True)
class OutputIdentity:
    """Device and inode of a regular file."""

    device: int
    inode: int

    @classmethod
    def of_stream(cls, stream: object) -> OutputIdentity | None:
        """Identify *stream* when it is redirected to a regular file.

        Terminals, pipes and streams without a descriptor yield ``None``.
        """
        try:
            fd = stream.fileno()  # type: ignore[attr-defined]
            if os.isatty(fd):
                return None
            st = os.fstat(fd)
        except (AttributeError, OSError, ValueError):
            return None
        if not stat.S_ISREG(st.st_mode):
            return None
        return cls(device=st.st_dev, inode=st.st_ino)

    @classmethod
    def of_path(cls, path: Path) -> OutputIdentity | None:
        try:
            st = os.stat(path)
        except OSError:
            return None
        return cls(device=st.st_dev, inode=st.st_ino)

    def is_same_file(self, path: Path) -> bool:
        return OutputIdentity.of_path(path) == self
