"""
AUR repository: resolve names through the AUR RPC ``info`` endpoint.

Names are sent in batches (``arg[]=a&arg[]=b``) so a whole request costs
one round trip per ``aur.batch_size`` names. Transport errors, malformed
JSON and RPC ``error`` replies all abort the lookup as a provider failure.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any

from pacgate import __version__
from pacgate.adapters.base import LookupResult, Repository
from pacgate.core.models.failure import FailureKind, Outcome
from pacgate.core.models.package import Buildable, FromAur, PkgName
from pacgate.core.models.settings import Settings

logger = logging.getLogger(__name__)

_USER_AGENT = f"pacgate/{__version__}"


class AurRpcError(Exception):
    """The RPC endpoint could not be queried or answered with an error."""


def info_url(rpc_url: str, names: list[str]) -> str:
    """Build the ``info`` URL for a batch of names."""
    query = urllib.parse.urlencode([("arg[]", n) for n in names])
    return f"{rpc_url.rstrip('/')}/info?{query}"


def fetch_info(url: str, timeout: int) -> list[dict[str, Any]]:
    """GET an ``info`` URL and return its ``results`` list.

    Raises:
        AurRpcError: On transport errors, bad JSON or an RPC error reply.
    """
    req = urllib.request.Request(url, headers={"User-Agent": _USER_AGENT})
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            payload = json.loads(resp.read().decode("utf-8"))
    except (urllib.error.URLError, TimeoutError, OSError) as e:
        raise AurRpcError(f"AUR unreachable: {e}") from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise AurRpcError(f"Malformed AUR response: {e}") from e

    if not isinstance(payload, dict):
        raise AurRpcError("Malformed AUR response: expected a JSON object")
    if payload.get("type") == "error":
        raise AurRpcError(f"AUR error: {payload.get('error', 'unknown')}")
    results = payload.get("results")
    if not isinstance(results, list):
        raise AurRpcError("Malformed AUR response: missing results")
    return results


def buildable_from_result(entry: dict[str, Any]) -> Buildable:
    """Convert one RPC result object into a ``Buildable``."""
    return Buildable(
        name=PkgName(entry["Name"]),
        version=entry.get("Version", ""),
        base=entry.get("PackageBase") or "",
        provides=tuple(entry.get("Provides") or ()),
        depends=tuple(entry.get("Depends") or ()),
        make_depends=tuple(entry.get("MakeDepends") or ()),
        url_path=entry.get("URLPath") or "",
        maintainer=entry.get("Maintainer"),
    )


class AurRepository(Repository):
    """Buildable recipes from the AUR."""

    @property
    def name(self) -> str:
        return "aur"

    def _lookup(self, settings: Settings, names: frozenset[PkgName]) -> Outcome[LookupResult]:
        ordered = sorted(names)
        size = settings.aur.batch_size
        found: dict[PkgName, FromAur] = {}

        for start in range(0, len(ordered), size):
            batch = ordered[start:start + size]
            url = info_url(settings.aur.rpc_url, batch)
            try:
                results = fetch_info(url, settings.aur.timeout)
            except AurRpcError as e:
                logger.warning("AUR lookup failed: %s", e)
                return Outcome.fail(FailureKind.PROVIDER_FAILURE, str(e), source=self.name)

            for entry in results:
                try:
                    pkg = buildable_from_result(entry)
                except (KeyError, TypeError, ValueError) as e:
                    return Outcome.fail(
                        FailureKind.PROVIDER_FAILURE,
                        f"Malformed AUR package entry: {e}",
                        source=self.name,
                    )
                found[pkg.name] = FromAur(pkg=pkg)

        logger.debug("aur: %d of %d resolved", len(found), len(names))
        return Outcome.success(
            LookupResult(
                unresolved=names - frozenset(found),
                resolved=frozenset(found.values()),
            )
        )
