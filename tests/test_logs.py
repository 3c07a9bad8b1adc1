import re
from datetime import datetime

from deichain.logs import format_log_line, log_message

LINE_PATTERN = re.compile(r"^\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\] (.*)$")


def test_format_log_line_with_fixed_time():
    when = datetime(2024, 1, 2, 3, 4, 5)
    assert format_log_line("hello", when) == "[2024-01-02 03:04:05] hello"


def test_format_log_line_defaults_to_now():
    line = format_log_line("ping")
    match = LINE_PATTERN.match(line)
    assert match is not None
    assert match.group(1) == "ping"


def test_log_message_prints_and_appends(tmp_path, capsys):
    log_file = tmp_path / "chain.log"
    first = log_message("first", log_file)
    second = log_message("second", log_file)

    out = capsys.readouterr().out.splitlines()
    assert out == [first, second]

    lines = log_file.read_text(encoding="utf-8").splitlines()
    assert lines == [first, second]
    assert LINE_PATTERN.match(lines[1]).group(1) == "second"


def test_log_message_console_only(tmp_path, capsys, monkeypatch):
    monkeypatch.chdir(tmp_path)
    line = log_message("quiet", None)
    assert capsys.readouterr().out.strip() == line
    assert list(tmp_path.iterdir()) == []


def test_log_message_unwritable_path_still_prints(tmp_path, capsys):
    target = tmp_path / "missing_dir" / "x.log"
    line = log_message("still here", target)
    assert capsys.readouterr().out.strip() == line
    assert not target.exists()