"""
Unit tests for the mozcpp command-line interface.

Tests:
- config, compile, includes and state commands
- Source tree detection and --root
- Error reporting and exit codes
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from mozcpp import cli
from mozcpp.build import Build


@pytest.fixture(autouse=True)
def no_logging_setup():
    """Keep main() from installing handlers on the root logger."""
    with patch("mozcpp.cli.setup_logging") as mock_setup:
        yield mock_setup


@pytest.fixture
def fake_probe(fake_runner):
    """Route every Build the CLI creates through the fake runner."""
    original = Build.probe

    def probe(root, settings=None):
        return original(root, settings, fake_runner)

    with patch.object(Build, "probe", side_effect=probe) as mock_probe:
        yield mock_probe


class TestMain:
    """Test suite for main() argument handling."""

    def test_no_command_prints_help(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main([])

        assert exc_info.value.code == 0
        assert "usage: mozcpp" in capsys.readouterr().out

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["--version"])

        assert exc_info.value.code == 0
        assert "mozcpp" in capsys.readouterr().out

    def test_verbose_passed_to_logging(self, no_logging_setup, tmp_path):
        log_file = tmp_path / "mozcpp.log"

        with pytest.raises(SystemExit):
            cli.main(["-v", "--log-file", str(log_file), "--root", str(tmp_path), "state"])

        no_logging_setup.assert_called_once_with(True, log_file)


class TestConfigCommand:
    """Test suite for `mozcpp config`."""

    def test_prints_configuration(self, fake_probe, source_tree, capsys):
        source = source_tree.add_source("dom/base/Element.cpp")
        source_tree.write_backend("dom/base", "COMPUTED_CXXFLAGS = -DFOO -Iinc\n")

        cli.main(["config", str(source)])

        result = json.loads(capsys.readouterr().out)
        assert "FOO=1" in result["defines"]
        assert str(source_tree.objdir / "dom" / "base" / "inc") in result["includePath"]
        assert result["standard"] == "c++14"
        assert result["intelliSenseMode"] == "clang-x64"

    def test_root_detected_from_source(self, fake_probe, source_tree):
        source = source_tree.add_source("dom/base/Element.cpp")
        source_tree.write_backend("dom/base", "COMPUTED_CXXFLAGS = -DFOO\n")

        cli.main(["config", str(source)])

        assert fake_probe.call_args[0][0] == source_tree.srcdir

    def test_no_configuration_exits_1(self, fake_probe, source_tree, capsys):
        source = source_tree.add_source("dom/a.cpp")

        with pytest.raises(SystemExit) as exc_info:
            cli.main(["config", str(source)])

        assert exc_info.value.code == 1
        assert "No configuration available" in capsys.readouterr().err

    def test_broken_quoting_exits_1(self, fake_probe, source_tree, capsys):
        source = source_tree.add_source("dom/a.cpp")
        source_tree.write_backend("dom", 'COMPUTED_CXXFLAGS = -DFOO="bar\n')

        with pytest.raises(SystemExit) as exc_info:
            cli.main(["config", str(source)])

        assert exc_info.value.code == 1
        assert "Invalid compiler flags" in capsys.readouterr().err

    def test_outside_source_tree_exits_1(self, fake_probe, tmp_path, capsys):
        source = tmp_path / "loose.cpp"
        source.write_text("")

        with pytest.raises(SystemExit) as exc_info:
            cli.main(["config", str(source)])

        assert exc_info.value.code == 1
        assert "No mach found" in capsys.readouterr().err

    def test_invalid_settings_exits_1(self, fake_probe, source_tree, tmp_path, capsys):
        source = source_tree.add_source("dom/a.cpp")
        settings = tmp_path / "bad.ini"
        settings.write_text("no section header\n")

        with pytest.raises(SystemExit) as exc_info:
            cli.main(["--settings", str(settings), "config", str(source)])

        assert exc_info.value.code == 1
        assert "Invalid settings" in capsys.readouterr().err

    def test_unusable_tree_exits_1(self, fake_probe, fake_runner, source_tree, capsys):
        source = source_tree.add_source("dom/a.cpp")
        fake_runner.mach_exit_code = 1

        with pytest.raises(SystemExit) as exc_info:
            cli.main(["config", str(source)])

        assert exc_info.value.code == 1
        assert "Unable to get a usable environment from mach." in capsys.readouterr().err


class TestCompileCommand:
    """Test suite for `mozcpp compile`."""

    def test_compile(self, fake_probe, fake_runner, source_tree, capsys):
        source = source_tree.add_source("dom/a.cpp")
        source_tree.write_backend("dom", "COMPUTED_CXXFLAGS = -DFOO\n")

        cli.main(["compile", str(source)])

        assert "succeeded" in capsys.readouterr().out
        assert fake_runner.commands_containing(str(source))


class TestIncludesCommand:
    """Test suite for `mozcpp includes`."""

    def test_includes(self, fake_probe, source_tree, capsys):
        cli.main(["--root", str(source_tree.srcdir), "includes"])

        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == str(source_tree.srcdir)
        assert str(Path("/usr/include")) in lines


class TestStateCommand:
    """Test suite for `mozcpp state`."""

    def test_state(self, fake_probe, source_tree, capsys):
        cli.main(["--root", str(source_tree.srcdir), "state"])

        state = json.loads(capsys.readouterr().out)
        assert state["srcdir"] == str(source_tree.srcdir)
        assert state["cppCompiler"]["family"] == "clang"

    def test_state_without_mach_exits_1(self, fake_probe, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["--root", str(tmp_path), "state"])

        assert exc_info.value.code == 1
        assert "No mach found in the source tree." in capsys.readouterr().err
