"""
Domain models for pacgate.

All models are re-exported here for convenient access:

    from pacgate.core.models import Dep, FromAur, Outcome, Settings
"""

from pacgate.core.models.failure import Failure, FailureError, FailureKind, Outcome
from pacgate.core.models.package import (
    AtLeast,
    Anything,
    Buildable,
    Dep,
    FromAur,
    FromRepo,
    LessThan,
    MoreThan,
    MustBe,
    Package,
    PackageGroup,
    PkgName,
    Prebuilt,
    SimplePkg,
    VersionDemand,
    parse_dep,
)
from pacgate.core.models.settings import (
    AurConfig,
    BuildConfig,
    EnvSnapshot,
    PacmanConfig,
    Settings,
)

__all__ = [
    # failure.py
    "Failure",
    "FailureError",
    "FailureKind",
    "Outcome",
    # package.py
    "Anything",
    "AtLeast",
    "Buildable",
    "Dep",
    "FromAur",
    "FromRepo",
    "LessThan",
    "MoreThan",
    "MustBe",
    "Package",
    "PackageGroup",
    "PkgName",
    "Prebuilt",
    "SimplePkg",
    "VersionDemand",
    "parse_dep",
    # settings.py
    "AurConfig",
    "BuildConfig",
    "EnvSnapshot",
    "PacmanConfig",
    "Settings",
]
