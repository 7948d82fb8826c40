import pytest

from installer.main_installer import build_pipeline, plugin_step_tag, run_setup
from setup.config_models import StepPolicy
from tests.conftest import make_settings


def test_plugin_step_tag():
    assert plugin_step_tag("zsh-syntax-highlighting") == "install_zsh_syntax_highlighting"


def test_build_pipeline_order_and_policies(app_settings):
    orchestrator = build_pipeline(app_settings, "linux")

    assert [t["name"] for t in orchestrator.tasks] == [
        "install_homebrew",
        "install_oh_my_zsh",
        "install_zsh_syntax_highlighting",
        "install_zsh_autosuggestions",
        "configure_zsh_plugins",
        "install_starship",
        "install_uv",
        "locate_zsh",
        "change_default_shell",
        "adjust_zshrc",
    ]
    policies = {t["name"]: t["policy"] for t in orchestrator.tasks}
    assert policies["change_default_shell"] is StepPolicy.SOFT_WARN
    assert policies["locate_zsh"] is StepPolicy.HARD_FAIL
    assert policies["install_homebrew"] is StepPolicy.HARD_FAIL


def test_build_pipeline_uses_configured_policies(home):
    settings = make_settings(home, step_policies={"install_uv": "soft_warn"})

    orchestrator = build_pipeline(settings, "linux")

    policies = {t["name"]: t["policy"] for t in orchestrator.tasks}
    assert policies["install_uv"] is StepPolicy.SOFT_WARN
    # Overriding the mapping drops the built-in soft step
    assert policies["change_default_shell"] is StepPolicy.HARD_FAIL


def test_one_task_per_configured_plugin(home):
    settings = make_settings(
        home, plugins=[{"name": "zsh-completions", "repo_url": "https://example.com/c.git"}]
    )

    names = [t["name"] for t in build_pipeline(settings, "macos").tasks]

    assert "install_zsh_completions" in names
    assert "install_zsh_autosuggestions" not in names


@pytest.mark.parametrize("ostype", ["win32", "cygwin", "freebsd14"])
def test_unsupported_platform_exits_before_any_change(fake_system, home, ostype):
    settings = make_settings(home, ostype=ostype)

    with pytest.raises(SystemExit) as exc_info:
        run_setup(settings)

    assert exc_info.value.code == 1
    assert fake_system.calls == []
