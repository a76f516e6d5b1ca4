import re

# Escape introducer either as the real ESC byte or spelled out the way models
# tend to echo it back (\033, \e, \x1b, \u001b), followed by a CSI sequence.
ANSI_ESCAPE_PATTERN = re.compile(r"(?:\x1b|\\033|\\e|\\x1b|\\u001b)\[[0-9;]*[A-Za-z]")


def sanitize(text: str) -> str:
    """
    Remove ANSI color and cursor escape sequences from model output.

    Removal repeats until nothing matches, so fragments that join into a new
    sequence once an inner one is stripped are removed too. Everything else,
    including newlines and quoting, is left untouched.
    """
    while True:
        cleaned = ANSI_ESCAPE_PATTERN.sub("", text)
        if cleaned == text:
            return cleaned
        text = cleaned
