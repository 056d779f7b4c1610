from __future__ import annotations
import math
import re

WORD_JOINER = "\u2060"
FIGURE_SPACE = "\u2007"

# Applied in order; later pairs see the output of earlier ones
SUBSTITUTIONS = (
    ("Traceback (most recent call last)", "TRACEBACK"),
    ("Stack trace", "STACK TRACE"),
    ("[]\n", "[] "),
    ("{}\n", "{} "),
    ("\n)", ")"),
    ("\n]", "]"),
    ("\n}", "}"),
    ("\n#", "\n\n#"),
    ("): ", "): \n"),
)

_INDENT_RE = re.compile(r"\n *")


def _halve_indent(match: re.Match) -> str:
    indent_size = math.ceil((len(match.group(0)) - 1) / 2)
    return "\n" + WORD_JOINER + FIGURE_SPACE * indent_size


def normalize(text: str) -> str:
    """Compact a multi-line dump for a chat window.

    Indentation is halved and pinned with a word joiner so the receiving
    client cannot reflow it. Not idempotent: run it once per value.
    """
    text = text.strip()
    for old, new in SUBSTITUTIONS:
        text = text.replace(old, new)
    return _INDENT_RE.sub(_halve_indent, text)
