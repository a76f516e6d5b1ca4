import logging
import sys

from . import ui
from .cli import run_cli
from .errors import CliTranslatorError

logger = logging.getLogger(__name__)

# 128 + SIGINT, what a shell reports for a Ctrl-C'd foreground job.
INTERRUPTED_EXIT_CODE = 130


def main():
    """Runs the translator and exits with the status of the last command it ran."""
    try:
        exit_code = run_cli()
    except KeyboardInterrupt:
        logger.info("Interrupted, no further commands run")
        ui.print_info("\nInterrupted.")
        sys.exit(INTERRUPTED_EXIT_CODE)
    except CliTranslatorError as e:
        logger.error(f"{type(e).__name__}: {e}")
        ui.print_error(str(e))
        sys.exit(1)
    except Exception as e:
        logger.exception(f"Unexpected failure: {e}")
        ui.print_error(f"Unexpected failure: {e}")
        sys.exit(1)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
