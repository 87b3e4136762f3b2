from pathlib import Path

from utils import error_messages as em


def test_format_error_with_optional_fields():
    msg = em.format_error(
        what_failed="Operation failed",
        reason="Because reasons",
        action="Do the thing",
        location=Path("/var/tmp"),
        details="More detail",
    )
    assert msg.splitlines() == [
        "ERROR: Operation failed",
        "  Reason: Because reasons",
        "  Action: Do the thing",
        f"  Location: {Path('/var/tmp')}",
        "  Details: More detail",
    ]


def test_format_error_without_optional_fields():
    msg = em.format_error("Bad", "Nope", "Fix it")
    assert "Location:" not in msg
    assert "Details:" not in msg


def test_log_error_calls_logging_error(monkeypatch):
    seen = {"message": None}

    def _capture(message):
        seen["message"] = message

    monkeypatch.setattr(em.logging, "error", _capture)
    em.log_error("Bad", "Nope", "Fix it")
    assert seen["message"] is not None
    assert "ERROR: Bad" in seen["message"]


def test_truncate_output():
    assert em.truncate_output(None) == ""
    assert em.truncate_output("short", 10) == "short"
    assert em.truncate_output("x" * 20, 10) == "x" * 10 + "..."


def test_format_command_error_truncates_output():
    out = em.format_command_error(["apt-get", "clean"], "exit status 100", output="y" * 600, max_chars=500)
    assert "Command failed: apt-get clean" in out
    assert "Reason: exit status 100" in out
    assert "Check that 'apt-get' is installed" in out
    assert "Details: " + "y" * 500 + "..." in out


def test_format_command_error_without_output_has_no_details():
    out = em.format_command_error(["pip", "cache", "purge"], "exit status 1", output="")
    assert "Details:" not in out


def test_format_purge_error_names_folder():
    out = em.format_purge_error(Path("/var/crash"), "cannot remove core.1: denied")
    assert "Could not clean folder contents" in out
    assert "Reason: cannot remove core.1: denied" in out
    assert f"Location: {Path('/var/crash')}" in out


def test_format_configuration_error():
    out = em.format_configuration_error("Invalid profile name provided: 'mallory'")
    assert out.startswith("ERROR: Cannot start cleanup")
    assert "mallory" in out
    assert "Action: Check the command line arguments" in out
