import logging
from typing import Callable, Optional

from . import ui
from .config import Config
from .errors import APIClientError, EmptyCommandError, PrerequisiteMissing
from .executor import CommandRunner
from .models import ExecutionResult
from .repair import RepairAdvisor
from .translator import Translator

logger = logging.getLogger(__name__)


class InteractionLoop:
    """
    Translate, confirm, run and, on failure, offer a single repaired command.

    The second run never leads to another repair, whatever its outcome.
    """

    def __init__(
        self,
        config: Config,
        translator: Translator,
        repair_advisor: RepairAdvisor,
        runner: CommandRunner,
        confirm: Callable[[str], bool] = ui.confirm_command,
    ):
        self.config = config
        self.translator = translator
        self.repair_advisor = repair_advisor
        self.runner = runner
        self.confirm = confirm

    def run(self, intent: str) -> int:
        """
        Handles one request end to end.

        Returns:
            The exit code to report: 0 for success or a declined command, 1 for a
            missing prerequisite or an API failure, otherwise the exit code of the
            last command that ran (including a failed command whose repair was declined).
        """
        try:
            self.config.check_prerequisites()
        except PrerequisiteMissing as e:
            ui.print_error(str(e))
            return 1

        try:
            command = self.translator.translate(intent)
        except APIClientError as e:
            ui.print_error(f"API Error: {e}")
            return 1

        if not self.confirm(command):
            logger.info("User declined to run the suggested command")
            return 0

        result = self._execute(command)
        if result is None:
            return 1
        if result.success:
            return 0

        ui.print_failure(result.exit_code)
        return self._repair(result, intent)

    def _repair(self, failed: ExecutionResult, intent: str) -> int:
        try:
            fixed_command = self.repair_advisor.repair(failed.command, failed.stderr, intent)
        except APIClientError as e:
            ui.print_error(f"Couldn't fix: {e}")
            return 1

        if not self.confirm(fixed_command):
            logger.info("User declined the repaired command")
            return failed.exit_code

        result = self._execute(fixed_command)
        if result is None:
            return 1
        if not result.success:
            logger.warning(f"Repaired command failed with exit code {result.exit_code}; not retrying")
        return result.exit_code

    def _execute(self, command: str) -> Optional[ExecutionResult]:
        try:
            return self.runner.run(command)
        except EmptyCommandError as e:
            ui.print_error(str(e))
            return None
