from core.tasks import Task
from utils import system_check
from utils.system_check import SystemCheck


def _fake_which(installed):
    def which(program, path=None):
        return f"/usr/bin/{program}" if program in installed else None
    return which


def test_missing_tools_in_first_use_order_without_duplicates(monkeypatch):
    monkeypatch.setattr(system_check.shutil, "which", _fake_which({"apt-get"}))
    catalog = [
        Task.command("Pacman Cache", ["pacman", "-Scc", "--noconfirm"]),
        Task.command("Apt Cache", ["apt-get", "clean"]),
        Task.purge("Temp", "/tmp"),
        Task.command("DNF Cache", ["dnf", "clean", "all"]),
        Task.command("Pacman Again", ["pacman", "-Sc"]),
    ]

    assert SystemCheck().missing_tools(catalog) == ["pacman", "dnf"]


def test_check_tool_caches_lookups(monkeypatch):
    calls = []

    def which(program, path=None):
        calls.append(program)
        return None

    monkeypatch.setattr(system_check.shutil, "which", which)
    checker = SystemCheck()
    assert checker.check_tool("npm") is False
    assert checker.check_tool("npm") is False
    assert calls == ["npm"]


def test_check_tool_uses_search_path(tmp_path):
    assert SystemCheck(path=str(tmp_path)).check_tool("sweepr-no-such-tool") is False


def test_display_tool_status(capsys):
    checker = SystemCheck()
    checker.display_tool_status([])
    assert "All cleanup tools found" in capsys.readouterr().out

    checker.display_tool_status(["dnf", "pacman"])
    assert "dnf, pacman" in capsys.readouterr().out
