import logging
from typing import List, Optional

from . import ui
from .api import ChatClient
from .config import Config
from .errors import APIClientError, PrerequisiteMissing
from .files import expand_patterns, read_excerpts
from .prompts import ANALYZE_SYSTEM_PROMPT, build_analyze_user_prompt
from .sanitizer import sanitize

logger = logging.getLogger(__name__)


def handle_analyze(
    config: Config,
    patterns: List[str],
    question: Optional[str] = None,
    client: Optional[ChatClient] = None,
) -> int:
    """Handler for the 'analyze' mode: summarizes or answers a question about matching files."""
    try:
        config.check_prerequisites()
    except PrerequisiteMissing as e:
        ui.print_error(str(e))
        return 1

    paths = expand_patterns(patterns)
    if not paths:
        ui.print_error(f"No files match: {' '.join(patterns)}")
        return 1

    try:
        excerpts = read_excerpts(paths, config.analyze_max_chars)
    except OSError as e:
        ui.print_error(f"Could not read files: {e}")
        return 1

    ui.print_info(f"Analyzing {len(excerpts)} file(s)...")
    client = client or ChatClient.from_config(config)
    try:
        response = client.complete(
            ANALYZE_SYSTEM_PROMPT,
            build_analyze_user_prompt(excerpts, question),
            config.temperature,
            config.analyze_max_tokens,
        )
    except APIClientError as e:
        ui.print_error(f"API Error: {e}")
        return 1

    ui.display_analysis(sanitize(response))
    return 0
