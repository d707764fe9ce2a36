# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/devsetup/config/models.py

from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class UnisonSpec(BaseModel):
    version: str = "2.51.4"
    # release tarball name on github, without the .tar.gz suffix
    release: str = "unison-v2.51.4+ocaml-4.12.0+x86_64.macos-10.15"
    download_base: str = "https://github.com/bcpierce00/unison/releases/download"

    @property
    def command(self) -> str:
        """Versioned binary name linked into the bin install dir, e.g. unison-2.51."""
        major_minor = ".".join(self.version.split(".")[:2])
        return f"unison-{major_minor}"

    @property
    def url(self) -> str:
        return f"{self.download_base}/v{self.version}/{self.release}.tar.gz"


class RepoSpec(BaseModel):
    url: str                              # git clone url
    directory: str = "monorepo"           # default checkout dir name under $HOME
    # alias name -> command; "{repo}" expands to the local checkout path
    aliases: Dict[str, str] = Field(default_factory=dict)
    # dependency installers, run in a login shell from the repo root
    install_commands: List[str] = Field(
        default_factory=lambda: ["gem install bundler", "bundle install -j4", "nvm install", "yarn install"]
    )
    # exits 0 when the dependencies are already in place
    installed_check: Optional[str] = "bundle check && test -d node_modules"
    # scripts run from the repo root after dependencies are installed
    setup_scripts: List[str] = Field(default_factory=list)
    hook_scripts: List[str] = Field(default_factory=list)
    hooks_marker: str = ".git/hooks/pre-commit"   # present once the hook scripts ran
    start_in_repo: bool = True            # offer to cd into the repo in new shells


class SetupConfig(BaseModel):
    email_domain: str = "example.com"
    brew_packages: List[str] = Field(
        default_factory=lambda: ["pyenv", "poetry", "awscli", "kubernetes-cli", "kubie"]
    )
    postgresql_version: int = 11
    ruby_version: str = "2.7.3"
    aliases: Dict[str, str] = Field(default_factory=lambda: {"k": "kubectl"})
    ssh_keys_url: str = "https://github.com/settings/keys"
    aws_pkg_url: str = "https://awscli.amazonaws.com/AWSCLIV2.pkg"
    unison: Optional[UnisonSpec] = Field(default_factory=UnisonSpec)
    repo: Optional[RepoSpec] = None


class SetupEnvironment(BaseModel):
    """
    Resolved, overridable parameters for a single run.

    Built once by ``resolve_environment`` and passed to every step; steps
    never look at ``os.environ`` themselves.
    """

    username: str
    machine: str
    email: str
    full_name: str
    home: Path
    repo_path: Path
    bin_install_dir: Path
    shell: str = ""
    profile_path: Path          # ~/.zshrc or ~/.bashrc depending on $SHELL
    zprofile_path: Path         # PATH edits go here, like the login shell expects
    version_path: Path

    @property
    def is_arm(self) -> bool:
        return self.machine == "arm64"

    @property
    def homebrew_prefix(self) -> Path:
        # Homebrew installs to /opt/homebrew on Apple silicon, /usr/local on Intel.
        return Path("/opt/homebrew") if self.is_arm else Path("/usr/local")
