import logging

from .api import ChatClient
from .config import Config
from .prompts import build_repair_system_prompt, build_repair_user_prompt
from .sanitizer import sanitize

logger = logging.getLogger(__name__)


class RepairAdvisor:
    """Asks the model for a corrected command after a failed run."""

    def __init__(self, client: ChatClient, config: Config):
        self.client = client
        self.config = config
        self.system_prompt = build_repair_system_prompt(config.description)

    def repair(self, failed_command: str, stderr: str, intent: str) -> str:
        """Returns the sanitized replacement command; API failures propagate unchanged."""
        logger.info(f"Requesting repair for failed command: {failed_command}")
        prompt = build_repair_user_prompt(intent, failed_command, stderr)
        response = self.client.complete(
            self.system_prompt, prompt, self.config.temperature, self.config.max_tokens
        )
        return sanitize(response)
