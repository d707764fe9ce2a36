# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/devsetup/config/loader.py

import getpass
import logging
import os
import platform
from pathlib import Path
from typing import Mapping, Optional

import yaml

from .models import SetupConfig, SetupEnvironment

log = logging.getLogger("devsetup")

VERSION_FILENAME = ".dev_setup_version"

SHELL_PROFILES = {
    "bash": ".bashrc",
    "zsh": ".zshrc",
}


def _load_yaml(path: Path) -> dict:
    """Load a YAML file, expanding ${ENV_VAR} references."""
    raw = path.read_text()
    expanded = os.path.expandvars(raw)
    return yaml.safe_load(expanded) or {}


def find_config_file(explicit: Optional[Path] = None) -> Optional[Path]:
    """
    Locate the setup config using this priority:

    1. explicit path (``--config``)
    2. DEVSETUP_CONFIG environment variable
    """
    if explicit is not None:
        if not explicit.is_file():
            raise FileNotFoundError(f"Config file not found: {explicit}")
        return explicit

    env = os.environ.get("DEVSETUP_CONFIG")
    if env:
        p = Path(env)
        if p.is_file():
            return p
        log.warning("DEVSETUP_CONFIG=%s does not exist, using defaults", env)
    return None


def load_config(path: Optional[str | Path] = None) -> SetupConfig:
    """
    Load and validate the setup config.

    Without a file every field falls back to its default, which reproduces
    the stock workstation setup (no company repository).
    """
    found = find_config_file(Path(path) if path is not None else None)
    if found is None:
        log.debug("No config file found, using defaults")
        return SetupConfig()

    log.debug("Loading config from %s", found)
    return SetupConfig.model_validate(_load_yaml(found))


def _full_name(username: str) -> str:
    try:
        import pwd
        gecos = pwd.getpwnam(username).pw_gecos
    except (ImportError, KeyError):
        return username
    name = gecos.split(",")[0].strip()
    return name or username


def _profile_path(home: Path, shell: str) -> Path:
    for suffix, filename in SHELL_PROFILES.items():
        if shell.endswith(suffix):
            return home / filename
    log.warning(
        "Your shell (%s) is not supported, you're on your own! Using ~/.profile", shell or "unknown"
    )
    return home / ".profile"


def resolve_environment(
    cfg: SetupConfig,
    environ: Optional[Mapping[str, str]] = None,
) -> SetupEnvironment:
    """
    Resolve every overridable parameter: the environment wins, otherwise a
    computed default is used.
    """
    environ = os.environ if environ is None else environ
    home = Path(environ.get("HOME") or Path.home())

    username = environ.get("USERNAME") or getpass.getuser()
    machine = environ.get("UNAME_MACHINE") or platform.machine()
    email = environ.get("EMAIL_ADDRESS") or f"{username}@{cfg.email_domain}"
    full_name = environ.get("USER_FULL_NAME") or _full_name(username)

    default_repo = home / (cfg.repo.directory if cfg.repo else "monorepo")
    repo_path = Path(environ.get("REPO_LOCAL_SOURCE_PATH") or default_repo).expanduser()
    bin_dir = Path(environ.get("BIN_INSTALL_DIR") or home / "bin").expanduser()

    shell = environ.get("SHELL", "")

    return SetupEnvironment(
        username=username,
        machine=machine,
        email=email,
        full_name=full_name,
        home=home,
        repo_path=repo_path,
        bin_install_dir=bin_dir,
        shell=shell,
        profile_path=_profile_path(home, shell),
        zprofile_path=home / ".zprofile",
        version_path=home / VERSION_FILENAME,
    )
