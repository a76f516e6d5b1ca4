import argparse
import sys
from typing import List, Optional

from dotenv import load_dotenv

from . import ui
from .api import ChatClient
from .config import Config, DEFAULT_CONFIG_FILE, create_default_config
from .errors import ConfigError
from .executor import CommandRunner
from .handlers import handle_analyze
from .logger import setup_logging
from .loop import InteractionLoop
from .repair import RepairAdvisor
from .translator import Translator

PROG = "cli-translator"
ANALYZE_MODE = "analyze"


def build_parser() -> argparse.ArgumentParser:
    """Parser for the default mode: everything after the options is the request."""
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Translate a natural-language request into a shell command, confirm it, and run it.",
        epilog=f"Use '{PROG} {ANALYZE_MODE} --help' to ask questions about files instead.",
    )
    _add_common_options(parser)
    parser.add_argument(
        "--no-stream",
        dest="stream_output",
        action="store_false",
        default=None,
        help="Capture command output and show it only after the command finishes.",
    )
    parser.add_argument(
        "--init-config",
        action="store_true",
        help=f"Write a default config file to {DEFAULT_CONFIG_FILE} and exit.",
    )
    parser.add_argument("intent", nargs=argparse.REMAINDER, help="What you want the command to do.")
    return parser


def build_analyze_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=f"{PROG} {ANALYZE_MODE}",
        description="Summarize files, or answer a question about them.",
    )
    _add_common_options(parser)
    parser.add_argument("-q", "--question", help="Question to ask about the files.")
    parser.add_argument("patterns", nargs="+", help="Files or glob patterns (quote them to use '**').")
    return parser


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", dest="config_file", help="Path to a TOML config file.")
    parser.add_argument("--model", help="Model identifier to request completions from.")
    parser.add_argument("-v", "--verbose", action="store_true", default=None, help="Log progress to stderr.")


def run_cli(argv: Optional[List[str]] = None) -> int:
    """Parses arguments, wires the components together and returns the exit code."""
    args_list = list(sys.argv[1:] if argv is None else argv)
    load_dotenv()

    if args_list and args_list[0] == ANALYZE_MODE:
        return _run_analyze(args_list[1:])

    args = build_parser().parse_args(args_list)

    if args.init_config:
        path = args.config_file or DEFAULT_CONFIG_FILE
        if create_default_config(path):
            ui.print_info(f"Created default config file at: {path}")
        else:
            ui.print_info(f"Config file already exists at: {path}")
        return 0

    intent = " ".join(args.intent).strip()
    if not intent:
        ui.print_usage(PROG)
        return 1

    config = _load_config(args.config_file, model=args.model, verbose=args.verbose, stream_output=args.stream_output)
    if config is None:
        return 1
    setup_logging(config)

    client = ChatClient.from_config(config)
    runner = CommandRunner(
        shell=config.shell,
        backup_root=config.backup_dir,
        stream=config.stream_output,
        confirm_backup=ui.confirm_backup,
        on_backup=lambda path: ui.print_info(f"Backed up targets to {path}"),
    )
    loop = InteractionLoop(
        config=config,
        translator=Translator(client, config),
        repair_advisor=RepairAdvisor(client, config),
        runner=runner,
    )
    return loop.run(intent)


def _run_analyze(argv: List[str]) -> int:
    args = build_analyze_parser().parse_args(argv)
    config = _load_config(args.config_file, model=args.model, verbose=args.verbose)
    if config is None:
        return 1
    setup_logging(config)
    return handle_analyze(config, args.patterns, args.question)


def _load_config(config_file: Optional[str], **overrides) -> Optional[Config]:
    try:
        return Config.load(config_file, **overrides)
    except ConfigError as e:
        ui.print_error(str(e))
        return None
