import logging

from .api import ChatClient
from .config import Config
from .prompts import build_translate_system_prompt
from .sanitizer import sanitize

logger = logging.getLogger(__name__)


class Translator:
    """Turns a natural-language intent into a single shell command."""

    def __init__(self, client: ChatClient, config: Config):
        self.client = client
        self.config = config
        self.system_prompt = build_translate_system_prompt(config.description)

    def translate(self, intent: str) -> str:
        """
        Asks the model for a command matching the intent.

        The sanitized completion is returned as-is; API failures propagate as
        APIClientError subclasses.
        """
        logger.info(f"Translating request: {intent}")
        response = self.client.complete(
            self.system_prompt, intent, self.config.temperature, self.config.max_tokens
        )
        command = sanitize(response)
        logger.info(f"Model suggested command: {command}")
        return command
