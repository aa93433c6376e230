"""
Tests for the check command.
"""

from argparse import Namespace
from unittest.mock import patch

import pytest

from altakit.cli.commands import check as check_command


@pytest.fixture
def check_args(temp_dir, monkeypatch):
    monkeypatch.chdir(temp_dir)
    return Namespace(config=None, requested_version=None, commit=None, exact=False)


class TestCheckCommand:
    """Test check command run()."""

    @patch("altakit.cli.commands.check.CompilerProbe")
    def test_satisfied(self, mock_probe_class, check_args, capsys):
        mock_probe_class.return_value.return_value = "altac 1.2.3"
        check_args.requested_version = "1.2.0"

        assert check_command.run(check_args) == 0
        assert "1.2.3" in capsys.readouterr().out

    @patch("altakit.cli.commands.check.CompilerProbe")
    def test_not_satisfied(self, mock_probe_class, check_args, capsys):
        mock_probe_class.return_value.return_value = "altac 2.0.0"
        check_args.requested_version = "1.2.0"

        assert check_command.run(check_args) == 1
        assert "does not satisfy" in capsys.readouterr().out

    @patch("altakit.cli.commands.check.CompilerProbe")
    def test_missing_compiler(self, mock_probe_class, check_args, capsys):
        mock_probe_class.return_value.return_value = None

        assert check_command.run(check_args) == 1
        assert "No installed compiler" in capsys.readouterr().out

    @patch("altakit.cli.commands.check.CompilerProbe")
    def test_commit(self, mock_probe_class, check_args):
        mock_probe_class.return_value.return_value = "(1.0.0-abc123d)"
        check_args.commit = "abc123d"

        assert check_command.run(check_args) == 0

    @patch("altakit.cli.commands.check.CompilerProbe")
    def test_invalid_version(self, mock_probe_class, check_args, capsys):
        check_args.requested_version = "1.2"

        assert check_command.run(check_args) == 1
        assert "Invalid version format" in capsys.readouterr().err

    @patch("altakit.cli.commands.check.CompilerProbe")
    def test_uses_configured_executable(self, mock_probe_class, check_args, temp_dir):
        (temp_dir / "altakit.yaml").write_text(
            "compiler_executable: /opt/alta/bin/altac\ntimeout: 5\n"
        )
        mock_probe_class.return_value.return_value = "altac 1.0.0"

        check_command.run(check_args)

        mock_probe_class.assert_called_once_with("/opt/alta/bin/altac", timeout=5)
