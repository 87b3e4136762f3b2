"""Tests for the sweepr command line entry point."""

import pytest

import sweepr
from core.engine import RunResult, TaskOutcome
from utils.cli_runtime import VERSION, build_sweepr_arg_parser, resolve_mode


class FakeEngine:
    def __init__(self):
        self.context = None
        self.catalog = None
        self.verbose = None

    def for_context(self, context, config=None):
        self.context = context
        return self

    def run(self, catalog, verbose=False):
        self.catalog = list(catalog)
        self.verbose = verbose
        return RunResult(100, 150, [TaskOutcome(t.description, True) for t in self.catalog])


@pytest.fixture
def cli(tmp_path, monkeypatch):
    """Run sweepr.main with logging, colour setup and the engine replaced."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(sweepr, "init", lambda: None)
    monkeypatch.setattr(sweepr, "setup_logging", lambda *_a, **_k: tmp_path / "sweepr-test.log")
    monkeypatch.setattr(sweepr, "discover_profiles", lambda _base: ["alice", "bob"])
    engine = FakeEngine()
    monkeypatch.setattr(sweepr.CleanupEngine, "for_context", engine.for_context)
    return engine


def _answers(monkeypatch, *answers):
    replies = iter(answers)
    monkeypatch.setattr("builtins.input", lambda _prompt="": next(replies))


def test_show_plan_previews_without_running(cli, capsys):
    assert sweepr.main(["--safe", "--platform", "unix", "--show-plan"]) == sweepr.EXIT_OK

    out = capsys.readouterr().out
    assert "Cleaning: Apt Cache" in out
    assert "apt-get clean" in out
    assert "No changes made" in out
    assert cli.catalog is None


def test_full_yes_runs_verbose_without_prompts(cli, monkeypatch, capsys):
    def no_input(_prompt=""):
        raise AssertionError("prompted in non-interactive mode")

    monkeypatch.setattr("builtins.input", no_input)

    assert sweepr.main(["--full", "--yes", "--platform", "unix"]) == sweepr.EXIT_OK
    assert cli.verbose is True
    assert cli.context.mode.value == "full"
    assert any(t.path == "/tmp" for t in cli.catalog)
    assert "sweepr-test.log" in capsys.readouterr().out


def test_user_mode_runs_only_inside_profile(cli):
    assert sweepr.main(["--user", "alice", "--yes", "--platform", "unix"]) == sweepr.EXIT_OK
    assert cli.catalog
    assert all(t.path.startswith("/home/alice/") for t in cli.catalog)


def test_user_mode_unknown_profile_fails_before_running(cli, capsys):
    assert sweepr.main(["--user", "mallory", "--yes", "--platform", "unix"]) == sweepr.EXIT_ERROR

    out = capsys.readouterr().out
    assert "Cannot start cleanup" in out
    assert "Invalid profile name provided: 'mallory'" in out
    assert cli.catalog is None


def test_user_mode_without_profiles(cli, monkeypatch, capsys):
    monkeypatch.setattr(sweepr, "discover_profiles", lambda _base: [])
    _answers(monkeypatch, "user")

    assert sweepr.main(["--platform", "unix"]) == sweepr.EXIT_ERROR
    assert "No user profiles found!" in capsys.readouterr().out


def test_yes_without_mode_fails_instead_of_prompting(cli, monkeypatch, capsys):
    def no_input(_prompt=""):
        raise AssertionError("prompted in non-interactive mode")

    monkeypatch.setattr("builtins.input", no_input)

    assert sweepr.main(["--yes", "--platform", "unix"]) == sweepr.EXIT_ERROR
    assert "No cleanup mode given" in capsys.readouterr().out
    assert cli.catalog is None


def test_interactive_flow_prompts_for_mode_verbose_and_confirmation(cli, monkeypatch):
    _answers(monkeypatch, "safe", "n", "")

    assert sweepr.main(["--platform", "unix"]) == sweepr.EXIT_OK
    assert cli.context.mode.value == "safe"
    assert cli.verbose is False


def test_interactive_user_mode_prompts_for_profile(cli, monkeypatch, capsys):
    _answers(monkeypatch, "user", "bob", "y", "")

    assert sweepr.main(["--platform", "windows"]) == sweepr.EXIT_OK
    assert cli.context.profile == "bob"
    assert cli.verbose is True
    assert "alice" in capsys.readouterr().out


def test_unknown_mode_is_rejected(cli, monkeypatch, capsys):
    _answers(monkeypatch, "deep")

    assert sweepr.main(["--platform", "unix"]) == sweepr.EXIT_ERROR
    assert "Unknown mode" in capsys.readouterr().out


def test_ctrl_c_at_confirmation_cancels(cli, monkeypatch, capsys):
    def interrupt(_prompt=""):
        raise KeyboardInterrupt

    monkeypatch.setattr("builtins.input", interrupt)

    assert sweepr.main(["--safe", "--verbose", "--platform", "unix"]) == sweepr.EXIT_INTERRUPTED
    assert "Cancelled by user" in capsys.readouterr().out
    assert cli.catalog is None


def test_config_file_is_used(cli, tmp_path, monkeypatch, capsys):
    config_file = tmp_path / "custom.json"
    config_file.write_text('{"journal_retention_days": 7}', encoding="utf-8")

    assert sweepr.main(["--safe", "--platform", "unix", "--show-plan", "-c", str(config_file)]) == 0
    assert "--vacuum-time=7d" in capsys.readouterr().out


def test_prompt_yes_no_treats_eof_as_no(monkeypatch):
    def eof(_prompt=""):
        raise EOFError

    monkeypatch.setattr("builtins.input", eof)
    assert sweepr.prompt_yes_no("Continue?") is False


def test_prompt_yes_no_repeats_until_valid(monkeypatch):
    _answers(monkeypatch, "maybe", "YES")
    assert sweepr.prompt_yes_no("Continue?") is True


def test_parser_modes_are_mutually_exclusive():
    parser = build_sweepr_arg_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["--safe", "--full"])
    with pytest.raises(SystemExit):
        parser.parse_args(["--safe", "--user", "alice"])


@pytest.mark.parametrize("argv,expected", [
    ([], None),
    (["-s"], "safe"),
    (["-f"], "full"),
    (["-u", "alice"], "user"),
])
def test_resolve_mode(argv, expected):
    assert resolve_mode(build_sweepr_arg_parser().parse_args(argv)) == expected


def test_version_flag(capsys):
    with pytest.raises(SystemExit) as excinfo:
        build_sweepr_arg_parser().parse_args(["--version"])
    assert excinfo.value.code == 0
    assert VERSION in capsys.readouterr().out
