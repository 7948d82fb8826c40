import logging
import subprocess
from unittest.mock import MagicMock

import pytest
from pytest_mock import MockerFixture

from common.command_utils import (
    command_exists,
    log_setup,
    run_command,
    run_elevated_command,
)
from setup.config_models import AppSettings


@pytest.fixture
def mock_logger():
    """Fixture to create a mock logger for testing."""
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def mock_app_settings():
    """Fixture to create mock AppSettings for testing."""
    mock_settings = MagicMock(spec=AppSettings)
    mock_settings.symbols = {"error": "❌", "gear": "⚙️", "warning": "!"}
    return mock_settings


@pytest.mark.parametrize(
    "level, method",
    [
        ("debug", "debug"),
        ("info", "info"),
        ("success", "info"),
        ("warning", "warning"),
        ("error", "error"),
        ("critical", "critical"),
    ],
)
def test_log_setup_levels(mock_logger, level, method):
    log_setup("hello", level, mock_logger)

    getattr(mock_logger, method).assert_called_once_with("hello", exc_info=False)


def test_run_command_success(mocker: MockerFixture, mock_logger, mock_app_settings):
    mock_run = mocker.patch(
        "common.command_utils.subprocess.run",
        return_value=subprocess.CompletedProcess(["echo", "hi"], 0, "hi\n", ""),
    )

    result = run_command(
        ["echo", "hi"],
        mock_app_settings,
        capture_output=True,
        current_logger=mock_logger,
    )

    assert result.returncode == 0
    mock_run.assert_called_once_with(
        ["echo", "hi"],
        check=True,
        capture_output=True,
        text=True,
        input=None,
        env=None,
    )
    mock_logger.info.assert_called_once_with("⚙️ Executing: echo hi", exc_info=False)
    mock_logger.debug.assert_called_once_with("   stdout: hi", exc_info=False)


def test_run_command_log_command_hides_script(
    mocker: MockerFixture, mock_logger, mock_app_settings
):
    mocker.patch(
        "common.command_utils.subprocess.run",
        return_value=subprocess.CompletedProcess([], 0),
    )

    run_command(
        ["sh", "-c", "#!/bin/sh\nlots of script"],
        mock_app_settings,
        current_logger=mock_logger,
        log_command="sh -c <https://example.com/install.sh>",
    )

    mock_logger.info.assert_called_once_with(
        "⚙️ Executing: sh -c <https://example.com/install.sh>", exc_info=False
    )


def test_run_command_failure_logs_and_reraises(
    mocker: MockerFixture, mock_logger, mock_app_settings
):
    error = subprocess.CalledProcessError(3, ["false"], output="", stderr="boom\n")
    mocker.patch("common.command_utils.subprocess.run", side_effect=error)

    with pytest.raises(subprocess.CalledProcessError) as exc_info:
        run_command(["false"], mock_app_settings, current_logger=mock_logger)

    assert exc_info.value.returncode == 3
    mock_logger.error.assert_any_call(
        "❌ Command `false` failed (rc 3).", exc_info=False
    )
    mock_logger.error.assert_any_call("   stderr: boom", exc_info=False)


def test_run_command_missing_executable(
    mocker: MockerFixture, mock_logger, mock_app_settings
):
    mocker.patch(
        "common.command_utils.subprocess.run",
        side_effect=FileNotFoundError(2, "No such file", "nope"),
    )

    with pytest.raises(FileNotFoundError):
        run_command(["nope"], mock_app_settings, current_logger=mock_logger)

    mock_logger.error.assert_called_once()


def test_run_elevated_command_prefixes_sudo(
    mocker: MockerFixture, mock_app_settings
):
    mocker.patch("common.command_utils.os.geteuid", return_value=1000)
    mock_run_command = mocker.patch("common.command_utils.run_command")

    run_elevated_command(["chmod", "0440", "/etc/sudoers.d/x"], mock_app_settings)

    assert mock_run_command.call_args[0][0] == [
        "sudo",
        "chmod",
        "0440",
        "/etc/sudoers.d/x",
    ]


def test_run_elevated_command_as_root_has_no_prefix(
    mocker: MockerFixture, mock_app_settings
):
    mocker.patch("common.command_utils.os.geteuid", return_value=0)
    mock_run_command = mocker.patch("common.command_utils.run_command")

    run_elevated_command(["rm", "-f", "/etc/sudoers.d/x"], mock_app_settings)

    assert mock_run_command.call_args[0][0] == ["rm", "-f", "/etc/sudoers.d/x"]


def test_run_elevated_command_forwards_input(
    mocker: MockerFixture, mock_app_settings
):
    mocker.patch("common.command_utils.os.geteuid", return_value=1000)
    mock_run_command = mocker.patch("common.command_utils.run_command")

    run_elevated_command(
        ["tee", "/etc/shells"],
        mock_app_settings,
        capture_output=True,
        cmd_input="/usr/bin/zsh\n",
    )

    mock_run_command.assert_called_once_with(
        ["sudo", "tee", "/etc/shells"],
        mock_app_settings,
        check=True,
        capture_output=True,
        cmd_input="/usr/bin/zsh\n",
        current_logger=None,
    )


def test_command_exists(mocker: MockerFixture):
    mocker.patch(
        "common.command_utils.shutil.which",
        side_effect=lambda name: "/usr/bin/git" if name == "git" else None,
    )

    assert command_exists("git") is True
    assert command_exists("starship") is False
