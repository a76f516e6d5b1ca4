import logging
import subprocess
import sys
import tempfile
import threading
from typing import Callable, IO, Optional

from .backup import backup_targets, deletion_targets, is_destructive
from .errors import EmptyCommandError
from .models import ExecutionResult

# Configure logging
logger = logging.getLogger(__name__)

# Exit status a POSIX shell reports for a command it could not find or start.
SPAWN_FAILURE_EXIT_CODE = 127


class CommandRunner:
    """
    Runs a command string through the platform shell.

    The string is handed to the shell untouched: no quoting, parsing or escaping
    happens here. The user confirms every command before it reaches this class,
    which keeps the trust boundary in this one call.
    """

    def __init__(
        self,
        shell: Optional[str] = None,
        backup_root: Optional[str] = None,
        stream: bool = True,
        confirm_backup: Optional[Callable[[str], bool]] = None,
        stdout: Optional[IO[str]] = None,
        stderr: Optional[IO[str]] = None,
        on_backup: Optional[Callable[[str], None]] = None,
    ):
        """
        Args:
            shell: Shell executable used for `-c`, or None for the platform default.
            backup_root: Directory that receives timestamped backups before `rm` commands.
            stream: Mirror output live while capturing it; otherwise print it once the command ends.
            confirm_backup: Asked with the command before a deletion; True means back up first.
            stdout: Terminal stream for mirrored stdout, sys.stdout by default.
            stderr: Terminal stream for mirrored stderr, sys.stderr by default.
            on_backup: Called with the backup directory after a backup was made.
        """
        self.shell = shell
        self.backup_root = backup_root
        self.stream = stream
        self.confirm_backup = confirm_backup
        self.on_backup = on_backup
        self._stdout = stdout
        self._stderr = stderr

    def run(self, command: str) -> ExecutionResult:
        """
        Execute a single shell command.

        A non-zero exit code is returned as data, not raised.

        Raises:
            EmptyCommandError: The command is empty or whitespace only; nothing is started.
        """
        if not command or not command.strip():
            raise EmptyCommandError()

        if is_destructive(command):
            self._offer_backup(command)

        logger.info(f"Executing command: {command}")
        try:
            if self.stream:
                result = self._run_streaming(command)
            else:
                result = self._run_captured(command)
        except OSError as e:
            logger.error(f"Could not start shell for command '{command}': {e}")
            return ExecutionResult(command=command, stdout="", stderr=str(e), exit_code=SPAWN_FAILURE_EXIT_CODE)

        if result.success:
            logger.info(f"Command executed successfully: {command}")
        else:
            logger.warning(f"Command failed with return code {result.exit_code}: {command}")
        return result

    def _offer_backup(self, command: str) -> None:
        if self.backup_root is None or self.confirm_backup is None:
            return
        if not self.confirm_backup(command):
            return
        try:
            backup_dir = backup_targets(deletion_targets(command), self.backup_root)
        except OSError as e:
            # Deletion proceeds without a backup.
            logger.warning(f"Backup skipped, cannot create backup directory under {self.backup_root}: {e}")
            return
        logger.info(f"Backed up targets to {backup_dir}")
        if self.on_backup is not None:
            self.on_backup(str(backup_dir))

    def _popen(self, command: str) -> subprocess.Popen:
        return subprocess.Popen(
            command,
            shell=True,
            executable=self.shell,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            encoding="utf-8",
            errors="replace",
        )

    def _run_captured(self, command: str) -> ExecutionResult:
        process = self._popen(command)
        stdout, stderr = process.communicate()
        stdout, stderr = stdout or "", stderr or ""
        for text, terminal in ((stdout, self._stdout or sys.stdout), (stderr, self._stderr or sys.stderr)):
            if text:
                terminal.write(text)
                terminal.flush()
        return ExecutionResult(command=command, stdout=stdout, stderr=stderr, exit_code=process.returncode)

    def _run_streaming(self, command: str) -> ExecutionResult:
        terminal_out = self._stdout or sys.stdout
        terminal_err = self._stderr or sys.stderr

        with tempfile.TemporaryFile("w+", encoding="utf-8") as out_buffer, \
                tempfile.TemporaryFile("w+", encoding="utf-8") as err_buffer:
            process = self._popen(command)
            readers = [
                threading.Thread(target=_tee, args=(process.stdout, terminal_out, out_buffer), daemon=True),
                threading.Thread(target=_tee, args=(process.stderr, terminal_err, err_buffer), daemon=True),
            ]
            for reader in readers:
                reader.start()
            exit_code = process.wait()
            for reader in readers:
                reader.join()

            out_buffer.seek(0)
            err_buffer.seek(0)
            return ExecutionResult(
                command=command,
                stdout=out_buffer.read(),
                stderr=err_buffer.read(),
                exit_code=exit_code,
            )


def _tee(pipe: IO[str], terminal: IO[str], buffer: IO[str]) -> None:
    """Copies a process pipe line by line to the terminal and to a capture buffer."""
    with pipe:
        for line in iter(pipe.readline, ""):
            terminal.write(line)
            terminal.flush()
            buffer.write(line)
