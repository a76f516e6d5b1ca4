from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class ChatMessage:
    """A single message of a chat completion request."""

    role: str
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class ExecutionResult:
    """
    Captured outcome of one command run.

    The command string is kept alongside the output so a repair request always
    refers to the command that actually produced this stderr.
    """

    command: str
    stdout: str
    stderr: str
    exit_code: int

    @property
    def success(self) -> bool:
        return self.exit_code == 0
