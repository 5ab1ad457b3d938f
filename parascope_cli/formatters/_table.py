"""Plain-text table rendering for --format table output."""

import re

_CONTROL_RE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]|[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def _trunc(s, maxlen):
    """Cut ``s`` to ``maxlen`` characters, marking the cut with an ellipsis."""
    if not s:
        return ""
    return s[: maxlen - 1] + "…" if len(s) > maxlen else s


def _sanitize_str(s):
    """Strip ANSI escape sequences and control chars; newlines and tabs survive."""
    if not s:
        return s
    return _CONTROL_RE.sub("", str(s))


def _cell(value):
    """Render one API value as cell text: None is blank, booleans are yes/blank."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "yes" if value else ""
    text = _sanitize_str(str(value))
    return text.replace("\n", " ").replace("\t", " ")


def _table(columns, rows, footer=None):
    """Render rows under a header, each column as wide as its widest cell.

    columns: (name, max_width) pairs; max_width 0 means unbounded. Cells
    wider than max_width are truncated.
    rows: sequences of raw values, one per column.
    footer: optional line printed after a blank line.
    """
    cells = [[_cell(v) for v in row] for row in rows]
    widths = []
    for i, (name, max_width) in enumerate(columns):
        widest = max([len(name)] + [len(row[i]) for row in cells])
        widths.append(min(widest, max_width) if max_width else widest)

    def line(values):
        return "  ".join(_trunc(v, w).ljust(w) for v, w in zip(values, widths)).rstrip()

    lines = [line([name for name, _ in columns]), "  ".join("-" * w for w in widths)]
    lines.extend(line(row) for row in cells)
    if footer:
        lines.append("")
        lines.append(footer)
    return "\n".join(lines)
