"""Tests for terminal output helpers."""

from __future__ import annotations

import pytest
from rich.console import Console

from workos_cli import printer
from workos_cli.tuples import DecisionTreeNode


def render(renderable: object) -> str:
    console = Console(width=200, color_system=None, highlight=False)
    with console.capture() as capture:
        console.print(renderable, soft_wrap=True)
    return capture.get()


class TestMessages:
    """Tests for plain and error output."""

    def test_markup_not_interpreted(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test user data with brackets is printed literally."""
        printer.print_msg("Assigned user:john owner document:xyz [region == 'eu']")
        assert capsys.readouterr().out == "Assigned user:john owner document:xyz [region == 'eu']\n"

    def test_print_err(self, capsys: pytest.CaptureFixture[str]) -> None:
        printer.print_err("invalid subject: john")
        captured = capsys.readouterr()
        assert captured.err == "Error: invalid subject: john\n"
        assert captured.out == ""

    def test_print_err_and_exit(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            printer.print_err_and_exit("no active environment configured", code=78)
        assert exc_info.value.code == 78
        assert "no active environment configured" in capsys.readouterr().err

    def test_print_json_model(self, capsys: pytest.CaptureFixture[str]) -> None:
        node = DecisionTreeNode(decision="matched")
        printer.print_json(node)
        out = capsys.readouterr().out
        assert '"decision": "matched"' in out
        assert out.startswith("{\n    ")

    def test_pagination(self, capsys: pytest.CaptureFixture[str]) -> None:
        printer.print_pagination(None, "org_02")
        lines = [line.rstrip() for line in capsys.readouterr().out.splitlines()]
        assert lines == ["Before:", "After: org_02"]


class TestTables:
    """Tests for bordered tables."""

    def test_rows_rendered(self) -> None:
        table = printer.new_table("Resource Type", "Resource ID")
        for row in (("document", "xyz"), ("user", None)):
            printer.add_row(table, *row)
        text = render(table)
        assert "Resource Type" in text
        assert "document" in text
        assert "┌" in text


class TestStatusAndTree:
    """Tests for check markers and decision trees."""

    def test_status_line(self) -> None:
        assert render(printer.status_line(True, "authorized", "user:john owner document:xyz")) == (
            f"{printer.CHECKMARK} authorized user:john owner document:xyz\n"
        )
        assert render(printer.status_line(False, "assert true", "user:john owner document:xyz")) == (
            f"{printer.CROSS} assert true user:john owner document:xyz\n"
        )

    def test_decision_tree(self) -> None:
        node = DecisionTreeNode.model_validate(
            {
                "check": {
                    "resource_type": "document",
                    "resource_id": "xyz",
                    "relation": "owner",
                    "subject": {"resource_type": "user", "resource_id": "john"},
                },
                "decision": "matched",
                "processing_time": 4_000_000,
                "children": [
                    {
                        "check": {
                            "resource_type": "document",
                            "resource_id": "xyz",
                            "relation": "editor",
                            "subject": {"resource_type": "user", "resource_id": "john"},
                        },
                        "policy": "region == 'eu'",
                        "decision": "eval_policy",
                        "processing_time": 1_000_000,
                    }
                ],
            }
        )
        lines = [line.rstrip() for line in render(printer.build_decision_tree(node)).splitlines()]
        assert lines[0] == f"{printer.CHECKMARK} document:xyz#owner@user:john (4ms)"
        assert lines[1].endswith("? document:xyz#editor@user:john - region == 'eu' (1ms)")
