"""
Settings: the immutable snapshot threaded through every operation.

Settings are built once (by the config loader) and never mutated. Every
core function receives them as an explicit parameter; there is no global
settings object.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_LOCK_FILE = "/var/lib/pacman/db.lck"
DEFAULT_AUR_RPC = "https://aur.archlinux.org/rpc/v5"


class EnvSnapshot(BaseModel):
    """Process identity facts captured at startup."""

    model_config = ConfigDict(frozen=True)

    euid: int
    user: str = ""
    sudo_user: str | None = None

    @classmethod
    def capture(cls, environ: dict[str, str] | None = None) -> EnvSnapshot:
        """Capture the identity of the running process."""
        env = os.environ if environ is None else environ
        return cls(
            euid=os.geteuid(),
            user=env.get("USER", ""),
            sudo_user=env.get("SUDO_USER") or None,
        )

    @property
    def has_root_priv(self) -> bool:
        """Root privilege, either directly or through sudo."""
        return self.euid == 0

    @property
    def is_true_root(self) -> bool:
        """The literal root account, not a sudo-elevated user."""
        return self.euid == 0 and self.sudo_user is None


class BuildConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    user: str | None = None         # build user; "root" is an explicit override
    path: str = "/tmp/pacgate"
    hot_edit: bool = False


class PacmanConfig(BaseModel):
    """How pacman is invoked."""

    model_config = ConfigDict(frozen=True)

    binary: str = "pacman"
    vercmp: str = "vercmp"
    lock_file: str = DEFAULT_LOCK_FILE
    no_confirm: bool = False
    flags: tuple[str, ...] = ()
    timeout: int = 120

    def as_flags(self) -> list[str]:
        """Common flags appended to mutating pacman calls."""
        flags = list(self.flags)
        if self.no_confirm and "--noconfirm" not in flags:
            flags.append("--noconfirm")
        return flags


class AurConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    rpc_url: str = DEFAULT_AUR_RPC
    batch_size: int = Field(default=150, ge=1)
    timeout: int = 10


class Settings(BaseModel):
    """Root settings snapshot."""

    model_config = ConfigDict(frozen=True)

    env: EnvSnapshot = Field(default_factory=EnvSnapshot.capture)
    language: str = "en"
    build: BuildConfig = Field(default_factory=BuildConfig)
    pacman: PacmanConfig = Field(default_factory=PacmanConfig)
    aur: AurConfig = Field(default_factory=AurConfig)
    repositories: tuple[str, ...] = Field(default=("sync", "aur"), min_length=1)

    @property
    def lock_path(self) -> Path:
        return Path(self.pacman.lock_file)
