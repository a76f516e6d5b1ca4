import glob
import os
from pathlib import Path
from typing import Iterable, List, Tuple

TRUNCATION_MARKER = "\n[... truncated ...]"


def expand_patterns(patterns: Iterable[str]) -> List[Path]:
    """
    Expands file patterns into an ordered list of regular files.

    Patterns are matched in the order given, matches within a pattern are sorted,
    `**` recurses into subdirectories and duplicates are dropped. A literal path
    without glob characters is kept when it names an existing file.
    """
    seen = set()
    paths: List[Path] = []
    for pattern in patterns:
        expanded = os.path.expanduser(pattern)
        if glob.has_magic(expanded):
            matches = sorted(glob.glob(expanded, recursive=True))
        else:
            matches = [expanded]
        for match in matches:
            path = Path(match)
            if not path.is_file():
                continue
            key = os.path.normcase(os.path.abspath(match))
            if key in seen:
                continue
            seen.add(key)
            paths.append(path)
    return paths


def read_excerpts(paths: Iterable[Path], max_chars: int) -> List[Tuple[str, str]]:
    """Reads each file as text, replacing undecodable bytes and truncating long files."""
    excerpts = []
    for path in paths:
        content = path.read_text(encoding="utf-8", errors="replace")
        if len(content) > max_chars:
            content = content[:max_chars] + TRUNCATION_MARKER
        excerpts.append((str(path), content))
    return excerpts
