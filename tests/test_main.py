"""
Tests for the command line parser.
"""

import pytest

import main


@pytest.mark.parametrize("argv", [
    ["month", "2025", "may"],
    ["entries", "twenty", "5"],
    ["log", "one", "2025-05-15", "2", "Work"],
])
def test_non_numeric_arguments_exit_with_usage(argv, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main.main(argv)

    assert exc_info.value.code == 2
    assert "invalid int value" in capsys.readouterr().err


def test_missing_command_exits_with_usage():
    with pytest.raises(SystemExit) as exc_info:
        main.build_parser().parse_args([])

    assert exc_info.value.code == 2


def test_log_arguments():
    args = main.build_parser().parse_args(["log", "3", "2025-05-15", "7.5", "Code", "review"])

    assert args.task_id == 3
    assert args.hours == "7.5"
    assert " ".join(args.description) == "Code review"


def test_month_arguments():
    args = main.build_parser().parse_args(["month", "2025", "5"])

    assert (args.command, args.year, args.month) == ("month", 2025, 5)
