import subprocess
import sys
from unittest import mock

from wtracker.osinfo import os_name, os_version


def test_os_name_is_lower_case_system():
    with mock.patch("platform.system", return_value="Linux"):
        assert os_name() == "linux"


def test_os_name_matches_platform():
    import platform

    assert os_name() == platform.system().lower()


def test_os_version_strips_uname_output():
    completed = subprocess.CompletedProcess(["uname", "-r"], 0, stdout="6.1.0-test\n", stderr="")
    with mock.patch.object(sys, "platform", "linux"), mock.patch(
        "subprocess.run", return_value=completed
    ) as run:
        assert os_version() == "6.1.0-test"
    assert run.call_args.args[0] == ["uname", "-r"]


def test_os_version_empty_when_command_missing():
    with mock.patch.object(sys, "platform", "linux"), mock.patch(
        "subprocess.run", side_effect=FileNotFoundError("uname")
    ):
        assert os_version() == ""


def test_os_version_empty_when_command_fails():
    error = subprocess.CalledProcessError(1, ["uname", "-r"])
    with mock.patch.object(sys, "platform", "linux"), mock.patch(
        "subprocess.run", side_effect=error
    ):
        assert os_version() == ""


def test_os_version_empty_on_windows():
    with mock.patch.object(sys, "platform", "win32"), mock.patch("subprocess.run") as run:
        assert os_version() == ""
    run.assert_not_called()