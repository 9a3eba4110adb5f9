"""
Sync-database repository: resolve names through ``pacman -Si``.

One pacman call per batch. pacman prints an info block for every name it
knows and an ``error: package 'x' was not found`` line for every name it
does not; the latter are unresolved names, not a provider failure.
"""

from __future__ import annotations

import logging
import re
import shutil

from pacgate.adapters.base import LookupResult, Repository
from pacgate.adapters.pacman.command import pacman
from pacgate.core.models.failure import FailureKind, Outcome
from pacgate.core.models.package import FromRepo, PkgName, Prebuilt
from pacgate.core.models.settings import Settings

logger = logging.getLogger(__name__)

_NOT_FOUND = re.compile(r"^error: package '(?P<name>[^']+)' was not found$")
_FIELD = re.compile(r"^(?P<key>[A-Za-z][A-Za-z ]*?)\s*:\s?(?P<value>.*)$")
_LIST_FIELDS = {"Provides", "Depends On"}


def parse_info_blocks(text: str) -> list[dict[str, str]]:
    """Split ``pacman -Si`` output into one field mapping per package.

    Continuation lines (indented) are appended to the previous field.
    """
    blocks: list[dict[str, str]] = []
    current: dict[str, str] = {}
    last_key: str | None = None

    for line in text.splitlines():
        if not line.strip():
            if current:
                blocks.append(current)
            current, last_key = {}, None
            continue
        if line[0].isspace() and last_key is not None:
            current[last_key] = f"{current[last_key]}  {line.strip()}"
            continue
        match = _FIELD.match(line)
        if match:
            last_key = match.group("key").strip()
            current[last_key] = match.group("value").strip()

    if current:
        blocks.append(current)
    return blocks


def _split_list(value: str) -> tuple[str, ...]:
    if not value or value == "None":
        return ()
    return tuple(value.split())


def prebuilt_from_block(block: dict[str, str]) -> Prebuilt:
    """Build a ``Prebuilt`` from one parsed info block."""
    fields = {key: _split_list(block.get(key, "")) for key in _LIST_FIELDS}
    return Prebuilt(
        name=PkgName(block["Name"]),
        version=block.get("Version", ""),
        repository=block.get("Repository", ""),
        provides=fields["Provides"],
        depends=fields["Depends On"],
    )


class SyncRepository(Repository):
    """Binary packages from the configured sync databases."""

    def __init__(self, binary: str = "pacman"):
        self.binary = binary

    @property
    def name(self) -> str:
        return "sync"

    def is_available(self) -> bool:
        return shutil.which(self.binary) is not None

    def _lookup(self, settings: Settings, names: frozenset[PkgName]) -> Outcome[LookupResult]:
        result = pacman(settings, ["-Si", "--", *sorted(names)])
        if not result.ran:
            return Outcome.fail(
                FailureKind.PROVIDER_FAILURE, result.describe(), source=self.name,
            )

        missing: set[PkgName] = set()
        other_errors: list[str] = []
        for line in result.stderr.splitlines():
            line = line.strip()
            if not line.startswith("error:"):
                continue
            match = _NOT_FOUND.match(line)
            if match:
                missing.add(PkgName(match.group("name")))
            else:
                other_errors.append(line)

        if other_errors or (result.returncode != 0 and not missing):
            return Outcome.fail(
                FailureKind.PROVIDER_FAILURE,
                "pacman -Si failed",
                detail="\n".join(other_errors) or result.describe(),
                source=self.name,
            )

        # A name present in several databases is listed once per database;
        # pacman prints them in priority order, so keep the first.
        found: dict[PkgName, FromRepo] = {}
        for block in parse_info_blocks(result.stdout):
            if "Name" not in block:
                continue
            pkg = prebuilt_from_block(block)
            found.setdefault(pkg.name, FromRepo(pkg=pkg))

        logger.debug("sync: %d resolved, %d not found", len(found), len(missing))
        return Outcome.success(
            LookupResult(
                unresolved=names - frozenset(found),
                resolved=frozenset(found.values()),
            )
        )
