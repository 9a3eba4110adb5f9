"""
Package models: names, version demands, dependencies and resolved packages.

A resolved ``Package`` is a closed, tagged union:

    FromRepo(Prebuilt)    a ready-to-install artifact from a sync database
    FromAur(Buildable)    a recipe that must be built locally first

Only repositories produce resolved packages. All models are frozen so
they can live in sets and be shared between threads.
"""

from __future__ import annotations

import re
from typing import Annotated, Literal, NewType

from pydantic import BaseModel, ConfigDict, Field

PkgName = NewType("PkgName", str)


# ── Version demands ─────────────────────────────────────────────


class _Demand(BaseModel):
    model_config = ConfigDict(frozen=True)


class Anything(_Demand):
    """No version constraint."""

    kind: Literal["anything"] = "anything"


class LessThan(_Demand):
    kind: Literal["lt"] = "lt"
    version: str


class AtLeast(_Demand):
    kind: Literal["ge"] = "ge"
    version: str


class MoreThan(_Demand):
    kind: Literal["gt"] = "gt"
    version: str


class MustBe(_Demand):
    kind: Literal["eq"] = "eq"
    version: str


VersionDemand = Annotated[
    Anything | LessThan | AtLeast | MoreThan | MustBe,
    Field(discriminator="kind"),
]

_OPERATORS: dict[str, type[_Demand]] = {
    "<": LessThan,
    ">=": AtLeast,
    ">": MoreThan,
    "=": MustBe,
}

_DEP_PATTERN = re.compile(r"^(?P<name>[^<>=\s]+)(?:(?P<op><=|>=|<|>|=)(?P<ver>\S+))?$")


class Dep(BaseModel):
    """One package's requirement on another."""

    model_config = ConfigDict(frozen=True)

    name: PkgName
    demand: VersionDemand = Field(default_factory=Anything)

    def as_query(self) -> str:
        """Render in the ``name<op><version>`` form pacman understands."""
        from pacgate.core.services.versions import render_demand

        return f"{self.name}{render_demand(self.demand)}"


def parse_dep(raw: str) -> Dep:
    """Parse pacman's dependency notation, e.g. ``"glibc>=2.38"``.

    Raises:
        ValueError: If the string is empty or uses an operator
            (such as ``<=``) that has no ``VersionDemand`` variant.
    """
    match = _DEP_PATTERN.match(raw.strip())
    if match is None:
        raise ValueError(f"Not a dependency string: {raw!r}")

    name = PkgName(match.group("name"))
    op = match.group("op")
    if op is None:
        return Dep(name=name)
    if op not in _OPERATORS:
        raise ValueError(f"Unsupported version operator {op!r} in {raw!r}")
    return Dep(name=name, demand=_OPERATORS[op](version=match.group("ver")))


# ── Package metadata ────────────────────────────────────────────


class SimplePkg(BaseModel):
    """An installed package as listed by ``pacman -Q``."""

    model_config = ConfigDict(frozen=True)

    name: PkgName
    version: str


class Prebuilt(BaseModel):
    """A binary package available from a sync database."""

    model_config = ConfigDict(frozen=True)

    name: PkgName
    version: str
    repository: str = ""            # core, extra, ...
    provides: tuple[str, ...] = ()
    depends: tuple[str, ...] = ()


class Buildable(BaseModel):
    """An AUR recipe: metadata plus where to fetch its build files."""

    model_config = ConfigDict(frozen=True)

    name: PkgName
    version: str
    base: str = ""                  # PackageBase; split packages share it
    provides: tuple[str, ...] = ()
    depends: tuple[str, ...] = ()
    make_depends: tuple[str, ...] = ()
    url_path: str = ""              # snapshot tarball path on the AUR
    maintainer: str | None = None

    @property
    def effective_base(self) -> str:
        """Package base, falling back to the package name."""
        return self.base or self.name


# ── Resolved packages (tagged union) ────────────────────────────


class FromRepo(BaseModel):
    model_config = ConfigDict(frozen=True)

    origin: Literal["repo"] = "repo"
    pkg: Prebuilt

    @property
    def name(self) -> PkgName:
        return self.pkg.name


class FromAur(BaseModel):
    model_config = ConfigDict(frozen=True)

    origin: Literal["aur"] = "aur"
    pkg: Buildable

    @property
    def name(self) -> PkgName:
        return self.pkg.name


Package = Annotated[FromRepo | FromAur, Field(discriminator="origin")]

# A non-empty set of packages handled as one build/install unit.
PackageGroup = frozenset[FromRepo | FromAur]
