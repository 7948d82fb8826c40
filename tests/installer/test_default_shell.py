import pytest

from common.exceptions import ExecutableNotFoundError, ShellChangeError
from installer.default_shell import ZSH_PATH_CONTEXT_KEY, DefaultShellChanger
from tests.conftest import make_executable


@pytest.fixture
def zsh(fake_system):
    return str(make_executable(fake_system.bin_dir / "zsh"))


def test_already_zsh_has_no_side_effects(fake_system, app_settings, zsh):
    app_settings.shell = "/usr/local/bin/zsh"
    shells_before = app_settings.login_shells_file.read_text()
    changer = DefaultShellChanger(app_settings, "linux")
    context = {}

    assert changer.locate_step(context) is None
    assert changer.change_step(context) is None

    assert context == {}
    assert fake_system.calls == []
    assert fake_system.login_shell is None
    assert app_settings.login_shells_file.read_text() == shells_before


def test_shell_named_like_zsh_is_not_zsh(fake_system, app_settings, zsh):
    app_settings.shell = "/usr/bin/zsh-wrapper"

    assert not DefaultShellChanger(app_settings, "linux").is_target_shell()


def test_change_with_chsh_registers_login_shell(fake_system, app_settings, zsh):
    changer = DefaultShellChanger(app_settings, "linux")
    context = {}

    assert changer.locate_step(context) == zsh
    assert context[ZSH_PATH_CONTEXT_KEY] == zsh
    assert changer.change_step(context) == "chsh"

    assert fake_system.login_shell == zsh
    assert app_settings.login_shells_file.read_text().splitlines()[-1] == zsh


def test_login_shell_registered_once(fake_system, app_settings, zsh):
    changer = DefaultShellChanger(app_settings, "linux")
    changer()
    changer()

    assert app_settings.login_shells_file.read_text().splitlines().count(zsh) == 1


def test_falls_back_to_usermod_on_linux(fake_system, app_settings, zsh):
    fake_system.fail_commands["chsh"] = 1

    assert DefaultShellChanger(app_settings, "linux")() == "usermod"
    assert fake_system.commands_named("usermod") == [["usermod", "-s", zsh, "tester"]]
    assert fake_system.login_shell == zsh


def test_all_mechanisms_fail(fake_system, app_settings, zsh):
    fake_system.fail_commands["chsh"] = 1
    fake_system.fail_commands["usermod"] = 1

    with pytest.raises(ShellChangeError) as exc_info:
        DefaultShellChanger(app_settings, "linux")()

    assert f"chsh -s {zsh}" in exc_info.value.remediation


def test_macos_has_no_usermod_fallback(fake_system, app_settings, zsh):
    fake_system.fail_commands["chsh"] = 1

    with pytest.raises(ShellChangeError):
        DefaultShellChanger(app_settings, "macos")()

    assert fake_system.commands_named("usermod") == []


def test_zsh_not_found(fake_system, app_settings):
    with pytest.raises(ExecutableNotFoundError) as exc_info:
        DefaultShellChanger(app_settings, "linux").locate_step({})

    assert "install" in exc_info.value.remediation


def test_candidates_checked_in_order(fake_system, app_settings, home):
    first = make_executable(home / "a" / "zsh")
    second = make_executable(home / "b" / "zsh")
    app_settings.zsh_candidates = [str(home / "missing" / "zsh"), str(first), str(second)]

    assert DefaultShellChanger(app_settings, "linux").locate() == str(first)


def test_missing_shells_file_is_skipped(fake_system, app_settings, zsh):
    app_settings.login_shells_file.unlink()

    assert DefaultShellChanger(app_settings, "linux")() == "chsh"
    assert fake_system.commands_named("tee") == []


def test_failed_shells_registration_is_only_a_warning(fake_system, app_settings, zsh):
    fake_system.fail_commands["tee"] = 1

    assert DefaultShellChanger(app_settings, "linux")() == "chsh"
