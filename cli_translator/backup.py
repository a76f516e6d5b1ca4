import glob
import logging
import os
import re
import shlex
import shutil
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

DESTRUCTIVE_PATTERN = re.compile(r"^\s*rm\s")
CONTROL_OPERATORS = {"&&", "||", ";", "|", "&"}
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def is_destructive(command: str) -> bool:
    """True when the command starts with `rm` followed by whitespace."""
    return bool(DESTRUCTIVE_PATTERN.match(command))


def deletion_targets(command: str) -> List[str]:
    """
    Returns the paths a leading `rm` would remove.

    Options are skipped (everything after `--` is a path), parsing stops at the
    first shell control operator and glob patterns are expanded against the
    filesystem the way the shell would. Unmatched patterns are kept literally.
    """
    try:
        tokens = shlex.split(command)
    except ValueError:
        tokens = command.split()

    targets: List[str] = []
    options_done = False
    for token in tokens[1:]:
        if token in CONTROL_OPERATORS:
            break
        if not options_done and token == "--":
            options_done = True
            continue
        if not options_done and token.startswith("-"):
            continue
        expanded = os.path.expanduser(token)
        if glob.has_magic(expanded):
            matches = sorted(glob.glob(expanded))
            candidates = matches or [expanded]
        else:
            candidates = [expanded]
        for candidate in candidates:
            if candidate not in targets:
                targets.append(candidate)
    return targets


def backup_targets(
    targets: Iterable[str], backup_root: str, now: Optional[datetime] = None
) -> Path:
    """
    Copies each target into a timestamped directory under backup_root.

    Copying is best-effort: a target that cannot be copied is logged and skipped.
    Targets sharing a name get a numeric suffix (`x`, `x.1`, `x.2`).

    Returns:
        The backup directory.
    """
    stamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
    backup_dir = Path(os.path.expanduser(backup_root)) / stamp
    backup_dir.mkdir(parents=True, exist_ok=True)

    for target in targets:
        source = Path(target)
        name = source.resolve().name if source.name in ("", ".", "..") else source.name
        if not name:
            logger.debug(f"Skipping backup of {target}: no usable name")
            continue
        destination = _unique_destination(backup_dir, name)
        try:
            if source.is_dir() and not source.is_symlink():
                shutil.copytree(source, destination, symlinks=True)
            else:
                shutil.copy2(source, destination, follow_symlinks=False)
        except (OSError, shutil.Error) as e:
            logger.debug(f"Could not back up {target}: {e}")
            continue
        logger.info(f"Backed up {target} to {destination}")

    return backup_dir


def _unique_destination(backup_dir: Path, name: str) -> Path:
    destination = backup_dir / name
    suffix = 1
    while destination.exists() or destination.is_symlink():
        destination = backup_dir / f"{name}.{suffix}"
        suffix += 1
    return destination
