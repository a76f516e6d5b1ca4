import logging
from typing import Any, Dict, List, Optional

import requests

from .config import Config
from .errors import APIError, EmptyResponseError, TransportError
from .models import ChatMessage

# Configure logging
logger = logging.getLogger(__name__)


class ChatClient:
    """A client for an OpenAI-compatible chat completions endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str,
        api_url: str,
        timeout: Optional[float] = None,
    ):
        """
        Initializes the ChatClient.

        Args:
            api_key: Bearer token sent with every request.
            model: The model identifier to request completions from.
            api_url: Full URL of the chat completions endpoint.
            timeout: Request timeout in seconds, or None to wait indefinitely.
        """
        self.api_key = api_key
        self.model = model
        self.api_url = api_url
        self.timeout = timeout
        logger.info(f"Initialized chat client with model: {self.model}")

    @classmethod
    def from_config(cls, config: Config) -> "ChatClient":
        return cls(
            api_key=config.api_key or "",
            model=config.model,
            api_url=config.api_url,
            timeout=config.request_timeout,
        )

    def build_payload(
        self, system_prompt: str, user_prompt: str, temperature: float, max_tokens: int
    ) -> Dict[str, Any]:
        """Builds the request body: exactly one system message followed by one user message."""
        messages = [
            ChatMessage(role="system", content=system_prompt),
            ChatMessage(role="user", content=user_prompt),
        ]
        return {
            "model": self.model,
            "messages": [message.to_dict() for message in messages],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

    def complete(
        self, system_prompt: str, user_prompt: str, temperature: float, max_tokens: int
    ) -> str:
        """
        Requests a single completion.

        Returns:
            The raw completion text, unmodified.

        Raises:
            TransportError: The request could not complete, or a non-2xx response had no error body.
            APIError: The response body contained an error object.
            EmptyResponseError: The response had no completion text.
        """
        payload = self.build_payload(system_prompt, user_prompt, temperature, max_tokens)
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        logger.info(f"Requesting completion from {self.api_url} (model={self.model})")

        try:
            response = requests.post(self.api_url, headers=headers, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Request to {self.api_url} failed: {e}")
            raise TransportError(str(e)) from e

        try:
            data = response.json()
        except ValueError:
            data = None

        if isinstance(data, dict) and data.get("error"):
            message = _error_message(data["error"])
            logger.error(f"API returned an error (status {response.status_code}): {message}")
            raise APIError(message, status_code=response.status_code)

        if not response.ok:
            logger.error(f"API request failed with status {response.status_code}")
            raise TransportError(f"HTTP {response.status_code} {response.reason or ''}".strip())

        if not isinstance(data, dict):
            raise TransportError("Response body is not a JSON object")

        content = _extract_content(data)
        if not content.strip():
            raise EmptyResponseError()
        return content


def _error_message(error: Any) -> str:
    if isinstance(error, dict):
        message = error.get("message")
        if message:
            return str(message)
        return str(error)
    return str(error)


def _extract_content(data: Dict[str, Any]) -> str:
    """Pulls choices[0].message.content, joining text parts when the content is a list."""
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return ""
    first = choices[0] if isinstance(choices[0], dict) else {}
    message = first.get("message") or {}
    content = message.get("content") if isinstance(message, dict) else None
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: List[str] = []
        for part in content:
            if isinstance(part, dict) and isinstance(part.get("text"), str):
                parts.append(part["text"])
            elif isinstance(part, str):
                parts.append(part)
        return "".join(parts)
    return ""
