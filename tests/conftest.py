# tests/conftest.py
import os
import subprocess
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from setup.config_models import AppSettings

OMZ_TEMPLATE = """export ZSH="$HOME/.oh-my-zsh"
ZSH_THEME="robbyrussell"
plugins=(git)
source $ZSH/oh-my-zsh.sh
"""


def make_settings(home: Path, **overrides) -> AppSettings:
    """AppSettings rooted in a temporary home, independent of the real environment."""
    values = dict(
        ostype="linux-gnu",
        home=home,
        user="tester",
        shell="/bin/bash",
        zsh_custom=None,
        sudoers_fragment_path=home / "etc" / "sudoers.d" / "setup_temp",
        login_shells_file=home / "etc" / "shells",
        linux_brew_candidates=[str(home / "linuxbrew" / "bin" / "brew")],
        zsh_candidates=[],
        readiness={
            "timeout": 0.01,
            "initial_interval": 0.001,
            "backoff_factor": 2.0,
            "max_interval": 0.005,
        },
    )
    values.update(overrides)
    return AppSettings(**values)


@pytest.fixture
def home(tmp_path) -> Path:
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def app_settings(home) -> AppSettings:
    return make_settings(home)


def make_executable(path: Path, content: str = "#!/bin/sh\n") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    path.chmod(0o755)
    return path


class FakeSystem:
    """
    Simulates the external world of the setup: every subprocess.run call is
    interpreted here and "installs" things by creating files under a
    temporary directory. PATH points at a private bin directory only.
    """

    def __init__(self, root: Path, settings: AppSettings):
        self.root = root
        self.settings = settings
        self.bin_dir = root / "bin"
        self.bin_dir.mkdir(parents=True, exist_ok=True)
        self.linuxbrew_bin = Path(settings.linux_brew_candidates[0]).parent
        self.calls: List[List[str]] = []
        self.installs: List[str] = []
        self.login_shell: Optional[str] = None
        self.fail_commands: Dict[str, int] = {}
        self.fragment_seen_during_run = False
        make_executable(self.bin_dir / "apt-get")
        make_executable(self.bin_dir / "usermod")
        settings.login_shells_file.parent.mkdir(parents=True, exist_ok=True)
        settings.login_shells_file.write_text("/bin/sh\n/bin/bash\n")

    # --- helpers ---
    def commands_named(self, name: str) -> List[List[str]]:
        return [c for c in self.calls if c and Path(c[0]).name == name]

    def _done(self, cmd, check, stdout="", stderr="", returncode=0):
        if check and returncode != 0:
            raise subprocess.CalledProcessError(returncode, cmd, stdout, stderr)
        return subprocess.CompletedProcess(cmd, returncode, stdout, stderr)

    def _remote_script(self, script: str) -> None:
        url = script.strip().split()[-1]
        self.installs.append(url)
        if url == self.settings.urls.homebrew:
            make_executable(self.linuxbrew_bin / "brew")
        elif url == self.settings.urls.oh_my_zsh:
            self.settings.oh_my_zsh_dir.mkdir(parents=True, exist_ok=True)
            if not self.settings.zshrc.exists():
                self.settings.zshrc.write_text(OMZ_TEMPLATE)
        elif url == self.settings.urls.starship:
            make_executable(self.bin_dir / "starship")
        elif url == self.settings.urls.uv:
            make_executable(self.bin_dir / "uv")

    # --- subprocess.run replacement ---
    def run(self, cmd, check=False, input=None, env=None, **kwargs):
        argv = list(cmd)
        if argv and argv[0] == "sudo":
            argv = argv[1:]
        self.calls.append(argv)
        name = Path(argv[0]).name

        if name in self.fail_commands:
            return self._done(cmd, check, returncode=self.fail_commands[name])

        if self.settings.sudoers_fragment_path.exists():
            self.fragment_seen_during_run = True

        if name in ("bash", "sh") and argv[1] == "-s":
            self._remote_script(input)
            return self._done(cmd, check)
        if name in ("bash", "sh") and argv[1] == "-c":
            script = argv[2]
            if script.startswith("#install"):
                self._remote_script(script)
                return self._done(cmd, check)
            if "env -0" in script:
                path = f"{self.linuxbrew_bin}{os.pathsep}{os.environ.get('PATH', '')}"
                return self._done(cmd, check, stdout=f"PATH={path}\0")
        if name == "brew" and argv[1:] == ["shellenv"]:
            return self._done(
                cmd,
                check,
                stdout=f'export HOMEBREW_PREFIX="{self.root}";\nexport PATH="{self.linuxbrew_bin}${{PATH+:$PATH}}";\n',
            )
        if name == "apt-get":
            if argv[1:3] == ["install", "-y"]:
                make_executable(self.bin_dir / argv[3])
            return self._done(cmd, check)
        if name == "git" and argv[1] == "clone":
            Path(argv[3]).mkdir(parents=True)
            return self._done(cmd, check)
        if name == "starship" and argv[1] == "preset":
            Path(argv[4]).write_text(f'"$schema" = "preset {argv[2]}"\n')
            return self._done(cmd, check)
        if name == "tee":
            target = Path(argv[-1])
            target.parent.mkdir(parents=True, exist_ok=True)
            mode = "a" if "-a" in argv else "w"
            with open(target, mode) as f:
                f.write(input or "")
            return self._done(cmd, check, stdout=input or "")
        if name == "chmod":
            Path(argv[2]).chmod(int(argv[1], 8))
            return self._done(cmd, check)
        if name == "rm":
            Path(argv[-1]).unlink(missing_ok=True)
            return self._done(cmd, check)
        if name in ("chsh", "usermod"):
            self.login_shell = argv[2]
            return self._done(cmd, check)
        if name == "zsh":
            return self._done(cmd, check)
        raise AssertionError(f"Unexpected command in fake system: {argv}")


@pytest.fixture
def fake_system(tmp_path, app_settings, monkeypatch) -> FakeSystem:
    system = FakeSystem(tmp_path / "system", app_settings)
    monkeypatch.setenv("PATH", str(system.bin_dir))
    monkeypatch.setattr(os, "geteuid", lambda: 1000)
    monkeypatch.setattr("common.command_utils.subprocess.run", system.run)
    monkeypatch.setattr(
        "common.network_utils.fetch_installer_script",
        lambda url, *args, **kwargs: f"#install {url}\n",
    )
    return system
