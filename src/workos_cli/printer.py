"""Terminal output helpers built on rich.

Plain messages go to stdout, errors to stderr. User data is never
interpreted as rich markup.
"""

from __future__ import annotations

import json
import sys
from typing import Any, Iterable, Optional

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from .tuples import Decision, DecisionTreeNode, describe_decision_node, node_millis

CHECKMARK = "✔"
CROSS = "✖"
QUESTION_MARK = "?"

if sys.platform == "win32":
    CHECKMARK = "√"
    CROSS = "×"

GREEN = "#00FF00"
RED = "#FF0000"
YELLOW = "#FFFF00"
HEADER = "#FFCC00"

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def print_msg(msg: Any) -> None:
    if isinstance(msg, str):
        msg = Text(msg)
    console.print(msg, soft_wrap=True)


def print_json(value: Any) -> None:
    """Pretty-print a JSON-serializable value (pydantic models included)."""
    if hasattr(value, "model_dump"):
        value = value.model_dump(mode="json", by_alias=True)
    elif isinstance(value, list):
        value = [v.model_dump(mode="json", by_alias=True) if hasattr(v, "model_dump") else v for v in value]
    print_msg(json.dumps(value, indent=4, default=str))


def print_err(msg: str) -> None:
    err_console.print(Text(f"Error: {msg}"), soft_wrap=True)


def print_err_and_exit(msg: str, code: int = 1) -> None:
    print_err(msg)
    raise SystemExit(code)


def green_text(*parts: str) -> Text:
    return Text(" ".join(parts), style=GREEN)


def red_text(*parts: str) -> Text:
    return Text(" ".join(parts), style=RED)


def yellow_text(*parts: str) -> Text:
    return Text(" ".join(parts), style=YELLOW)


def new_table(*headers: str) -> Table:
    """Bordered table with highlighted headers."""
    table = Table(box=box.SQUARE, show_lines=False, header_style=HEADER)
    for header in headers:
        table.add_column(header)
    return table


def add_row(table: Table, *cells: Any) -> None:
    table.add_row(*(Text("" if c is None else str(c)) for c in cells))


def print_pagination(before: Optional[str], after: Optional[str]) -> None:
    print_msg(f"Before: {before or ''}")
    print_msg(f"After: {after or ''}")


def status_line(passed: bool, label: str, detail: str) -> Text:
    """``✔ authorized user:john owner document:xyz`` with a coloured marker."""
    marker = green_text(CHECKMARK, label) if passed else red_text(CROSS, label)
    return Text.assemble(marker, " ", detail)


def _decision_label(node: DecisionTreeNode) -> Text:
    markers = {
        Decision.MATCHED.value: green_text(CHECKMARK),
        Decision.NOT_MATCHED.value: red_text(CROSS),
        Decision.EVAL_POLICY.value: yellow_text(QUESTION_MARK),
    }
    text = Text(describe_decision_node(node))
    marker = markers.get(node.decision)
    if marker is not None:
        text = Text.assemble(marker, " ", text)
    text.append(f" ({node_millis(node)}ms)")
    return text


def build_decision_tree(node: DecisionTreeNode, tree: Optional[Tree] = None) -> Tree:
    """Coloured rich Tree mirroring tuples.render_decision_tree()."""
    branch = Tree(_decision_label(node)) if tree is None else tree.add(_decision_label(node))
    for child in node.children:
        build_decision_tree(child, branch)
    return branch


def print_rows(table: Table, rows: Iterable[Iterable[Any]]) -> None:
    for row in rows:
        add_row(table, *row)
    print_msg(table)


__all__ = [
    "CHECKMARK",
    "CROSS",
    "QUESTION_MARK",
    "console",
    "err_console",
    "print_msg",
    "print_json",
    "print_err",
    "print_err_and_exit",
    "green_text",
    "red_text",
    "yellow_text",
    "new_table",
    "add_row",
    "print_rows",
    "print_pagination",
    "status_line",
    "build_decision_tree",
]
