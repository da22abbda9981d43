import enum
import logging
import os
import subprocess
from contextlib import nullcontext
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from result_table import ResultTable

logger = logging.getLogger(__name__)

SIGNAL_EXIT_CODE = -1
RESULT_HEADER = ["path", "exit_code", "stdout", "stderr"]


class ShellError(Exception):
    """Recoverable failure raised while running a submission."""


class ProgramSpawnError(ShellError):
    pass


class StreamDecodeError(ShellError):
    pass


class ExecutionMode(enum.Enum):
    CAPTURED = "captured"
    PASSTHROUGH = "passthrough"


class ModeFlag:
    """Execution mode for the next program call of one evaluation.

    ``take`` hands out the current mode once and falls back to CAPTURED, so
    only the first call of a submission can inherit the terminal.
    """

    def __init__(self, mode: ExecutionMode = ExecutionMode.CAPTURED):
        self._mode = mode

    def set(self, mode: ExecutionMode) -> None:
        self._mode = mode

    def peek(self) -> ExecutionMode:
        return self._mode

    def take(self) -> ExecutionMode:
        mode = self._mode
        self._mode = ExecutionMode.CAPTURED
        return mode


@dataclass(frozen=True)
class ProgramDescriptor:
    name: str
    path: str


@dataclass
class ProcessRecord:
    path: str
    args: List[str]
    exit_code: Optional[int] = None
    stdout: str = ""
    stderr: str = ""
    passthrough: bool = False

    def to_table(self) -> Optional[ResultTable]:
        if self.passthrough:
            return None
        return ResultTable(
            RESULT_HEADER, [[self.path, self.exit_code, self.stdout, self.stderr]]
        )


@dataclass
class ProgramRegistry:
    programs: Dict[str, ProgramDescriptor] = field(default_factory=dict)

    @classmethod
    def from_search_path(cls, search_path: Optional[str] = None):
        if search_path is None:
            search_path = os.environ.get("PATH", "")
        registry = cls()
        for directory in search_path.split(os.pathsep):
            if not directory:
                continue
            registry.scan_directory(directory)
        logger.info("bound %d programs from search path", len(registry))
        return registry

    def scan_directory(self, directory: str) -> None:
        try:
            entries = sorted(os.scandir(directory), key=lambda e: e.name)
        except OSError:
            return
        for entry in entries:
            try:
                if not entry.is_file():
                    continue
            except OSError:
                continue
            if os.access(entry.path, os.X_OK):
                # later directories win
                self.programs[entry.name] = ProgramDescriptor(entry.name, entry.path)

    def register(self, name: str, path: str) -> None:
        self.programs[name] = ProgramDescriptor(name, path)

    def get(self, name: str) -> Optional[ProgramDescriptor]:
        return self.programs.get(name)

    def names(self) -> List[str]:
        return sorted(self.programs)

    def __contains__(self, name) -> bool:
        return name in self.programs

    def __len__(self) -> int:
        return len(self.programs)


def _decode(data: bytes, stream: str, path: str) -> str:
    try:
        return data.decode("utf-8").rstrip()
    except UnicodeDecodeError as e:
        raise StreamDecodeError(f"{path}: {stream} is not valid UTF-8 ({e.reason})") from e


class ProcessArbiter:
    """Runs bound programs either captured into a table or attached to the tty.

    ``suspend`` returns the context manager that releases the terminal for the
    duration of a passthrough child.
    """

    def __init__(self, suspend: Optional[Callable] = None):
        self.suspend = suspend or nullcontext

    def invoke(self, program: ProgramDescriptor, args, flag: ModeFlag):
        # the flag is consumed before the child starts, so it is CAPTURED
        # again on every way out of this call
        return self.run(program, args, flag.take())

    def run(self, program: ProgramDescriptor, args, mode: ExecutionMode):
        argv = [program.path] + [str(a) for a in args]
        if mode is ExecutionMode.PASSTHROUGH:
            record = self._run_passthrough(argv)
        else:
            record = self._run_captured(argv)
        return record.to_table()

    def _run_captured(self, argv) -> ProcessRecord:
        path = argv[0]
        try:
            proc = subprocess.run(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            logger.warning("failed to start %s: %s", path, e)
            raise ProgramSpawnError(f"cannot run {path}: {e.strerror or e}") from e

        code = proc.returncode
        if code < 0:
            code = SIGNAL_EXIT_CODE
        return ProcessRecord(
            path=path,
            args=argv[1:],
            exit_code=code,
            stdout=_decode(proc.stdout, "stdout", path),
            stderr=_decode(proc.stderr, "stderr", path),
        )

    def _run_passthrough(self, argv) -> ProcessRecord:
        path = argv[0]
        logger.debug("passthrough start: %s", argv)
        with self.suspend():
            try:
                code = subprocess.run(argv).returncode
            except OSError as e:
                logger.warning("failed to start %s: %s", path, e)
                raise ProgramSpawnError(f"cannot run {path}: {e.strerror or e}") from e
        logger.debug("passthrough finished: %s exited %s", path, code)
        return ProcessRecord(path=path, args=argv[1:], exit_code=code, passthrough=True)
