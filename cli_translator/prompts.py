import platform
from typing import Iterable, Optional, Tuple

TRANSLATE_INSTRUCTION = (
    "Act as a command-line tool that converts natural language requests "
    "into executable shell commands."
)

REPAIR_INSTRUCTION = (
    "Given a failed command, its error message, and the user's intent, provide the "
    "corrected command without commentary. If dependencies are missing, include "
    "installation commands with appropriate && chaining. Check for command alternatives "
    "when possible, using conditional execution patterns like 'command || alternative_command'. "
    "Verify file/directory existence with tests where needed. Always provide a complete, "
    "executable solution that can be run directly in terminal with all necessary "
    "preparations and fallbacks included."
)

ANALYZE_SYSTEM_PROMPT = (
    "You are an expert software engineer and technical writer. You will be given the "
    "contents of one or more files, each introduced by a '=== path ===' header, followed "
    "by a question. Answer the question about those files concisely. Use Markdown. "
    "Refer to files by their path."
)

DEFAULT_ANALYZE_QUESTION = "Summarize what these files contain and what they are for."


def environment_summary() -> str:
    """Equivalent of `uname -a` for the machine we are running on."""
    uname = platform.uname()
    return " ".join(
        part for part in (uname.system, uname.node, uname.release, uname.version, uname.machine) if part
    )


def build_common_prompt(description: Optional[str] = None, system: Optional[str] = None) -> str:
    """Describes the execution environment and insists on a bare, directly executable command."""
    system = system or environment_summary()
    running = f"running {description.strip()}, " if description and description.strip() else ""
    return (
        f"You are an expert sys admin, {running}uname -a is {system}. "
        "Your task is to produce effective and efficient, executable shell commands. "
        "IMPORTANT: Return ONLY the raw command as plain text with no formatting, no markdown, "
        "no code blocks, and no explanations. Your output will be momentarily executed "
        "directly in the terminal."
    )


def build_translate_system_prompt(description: Optional[str] = None, system: Optional[str] = None) -> str:
    return f"{build_common_prompt(description, system)} {TRANSLATE_INSTRUCTION}"


def build_repair_system_prompt(description: Optional[str] = None, system: Optional[str] = None) -> str:
    return f"{build_common_prompt(description, system)} {REPAIR_INSTRUCTION}"


def build_repair_user_prompt(intent: str, failed_command: str, error: str) -> str:
    return f"Intent: {intent}\nFailed command: {failed_command}\nError: {error}\nProvide correct command:"


def build_analyze_user_prompt(files: Iterable[Tuple[str, str]], question: Optional[str] = None) -> str:
    sections = [f"=== {path} ===\n{content}" for path, content in files]
    sections.append(f"Question: {question or DEFAULT_ANALYZE_QUESTION}")
    return "\n\n".join(sections)
