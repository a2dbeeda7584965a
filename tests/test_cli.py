"""
Tests for the command line interface.

Verifies that:
1. ``pattern`` and ``template`` print the built result.
2. ``--against`` runs the pattern and prints bindings.
3. Flags are forwarded as explicit options only.
4. Engine and parse errors produce exit code 1.
5. ``[tool.quasitree]`` defaults are honored.
"""

from unittest.mock import patch

import pytest

from quasitree.cli.__main__ import main


def test_pattern_command(recorded_console):
  assert main(["pattern", "x + y"]) == 0
  assert "{:+, _, [x, y]}" in recorded_console.export_text()


def test_pattern_against_value(recorded_console):
  assert main(["pattern", "f(a, splice(rest))", "--against", "f(1, 2, 3)"]) == 0

  output = recorded_console.export_text()
  assert "a = 1" in output
  assert "rest = [2, 3]" in output


def test_pattern_mismatch(recorded_console):
  assert main(["pattern", "x + y", "--against", "x - y"]) == 1
  assert "No match" in recorded_console.export_text()


def test_template_command(recorded_console):
  assert main(["template", "x + 1", "--bind", "x", "--no-positions"]) == 0
  assert "{:+, {}, [x, 1]}" in recorded_console.export_text()


def test_template_without_binding(recorded_console):
  assert main(["template", "x + 1", "--no-meta"]) == 0
  assert "{:+, {}, [{:x, {}, None}, 1]}" in recorded_console.export_text()


@pytest.mark.parametrize(
  "code, message",
  [
    ("quote(1, 2)", "Malformed 'quote' marker"),
    ("f(", "Pattern failed"),
    ("x = 1", "Expected an expression"),
  ],
)
def test_pattern_errors(recorded_console, code, message):
  assert main(["pattern", code]) == 1
  assert message in recorded_console.export_text()


@patch("quasitree.cli.commands.handle_template")
def test_template_flags_forwarded(mock_handle):
  mock_handle.return_value = 0
  main(["template", "f(x)", "--bind", "x", "--bind", "y", "--ssa", "--canonical", "true", "--debug", "tpl"])

  code, options, bind, positions = mock_handle.call_args[0]
  assert code == "f(x)"
  assert options == {"to_canonical": "true", "debug": "tpl", "to_ssa": True}
  assert bind == ["x", "y"]
  assert positions is True


@patch("quasitree.cli.commands.handle_pattern")
def test_pattern_without_flags_has_no_options(mock_handle):
  mock_handle.return_value = 0
  main(["pattern", "f(x)", "--debug"])

  assert mock_handle.call_args[0][1] == {"debug": True}


def test_project_defaults_are_used(recorded_console, tmp_path, monkeypatch):
  (tmp_path / "pyproject.toml").write_text("[tool.quasitree]\nkeep_metadata = false\n", encoding="utf-8")
  monkeypatch.chdir(tmp_path)

  assert main(["template", "f(1)"]) == 0
  assert "{:f, {}, [1]}" in recorded_console.export_text()


def test_invalid_project_defaults(recorded_console, tmp_path, monkeypatch):
  (tmp_path / "pyproject.toml").write_text("[tool.quasitree]\ncolour = 'red'\n", encoding="utf-8")
  monkeypatch.chdir(tmp_path)

  assert main(["template", "f(1)"]) == 1
  assert "Template failed" in recorded_console.export_text()
