"""
DomainResolver - maps an email sender's domain to the owning account
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Mapping, Optional

from shared.infrastructure.observability.logger import get_logger

from access.domain.exceptions import StoreUnavailableError
from access.domain.protocols.domain_mapping_repository_protocol import IDomainMappingSource
from access.domain.services.domain_names import extract_domain, parent_suffixes
from access.domain.value_objects.resolution import Resolution

logger = get_logger(__name__)

Clock = Callable[[], float]

DEFAULT_TTL_SECONDS = 300
DEFAULT_RETRY_SECONDS = 30


@dataclass(frozen=True)
class CacheStats:
    size: int
    expires_in: float
    is_expired: bool


@dataclass(frozen=True)
class ResolutionDiagnostics:
    """Result of `DomainResolver.test_resolution`."""

    address: str
    domain: Optional[str]
    resolution: Optional[Resolution]
    cache: CacheStats
    error: Optional[str] = None


@dataclass(frozen=True)
class _CacheEntry:
    mappings: Mapping[str, Resolution]
    expires_at: float


class DomainResolver:
    """
    Resolves email addresses and hostnames to accounts.

    Active mappings are held in one immutable map rebuilt from the store when
    the TTL lapses or after `invalidate_cache()`. An exact domain match wins
    outright; otherwise parent domains are tried and the highest priority
    wins, the more specific suffix breaking ties.

    If a rebuild fails, the last map that loaded successfully keeps being
    served for `retry_seconds` before the store is tried again. With no such
    map the failure surfaces as StoreUnavailableError.

    Attributes:
        ttl_seconds: Lifetime of a loaded map
        retry_seconds: How long the last good map is served after a failed rebuild
    """

    def __init__(
        self,
        source: IDomainMappingSource,
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        retry_seconds: float = DEFAULT_RETRY_SECONDS,
        clock: Clock = time.monotonic,
    ) -> None:
        self._source = source
        self.ttl_seconds = ttl_seconds
        self.retry_seconds = retry_seconds
        self._clock = clock
        self._entry: Optional[_CacheEntry] = None
        self._last_good: Optional[Mapping[str, Resolution]] = None

    async def resolve(self, email_or_domain: str) -> Optional[Resolution]:
        """
        Find the account owning an email address or domain.

        Returns:
            Resolution, or None when the input is empty or nothing matches
        """
        domain = extract_domain(email_or_domain)
        if domain is None:
            return None

        mappings = await self._current_mappings()

        exact = mappings.get(domain)
        if exact is not None:
            return exact

        best: Optional[Resolution] = None
        for suffix in parent_suffixes(domain):
            candidate = mappings.get(suffix)
            # strict '>' keeps the earlier, more specific suffix on a tie
            if candidate is not None and (best is None or candidate.priority > best.priority):
                best = candidate

        if best is None:
            logger.debug("No domain mapping matched", domain=domain)
            return None
        return best.as_suffix_match()

    def invalidate_cache(self) -> None:
        """Drop the cached map; the next resolve rebuilds it."""
        self._entry = None
        logger.info("Domain cache invalidated")

    def cache_stats(self) -> CacheStats:
        entry = self._entry
        if entry is None:
            return CacheStats(size=0, expires_in=0.0, is_expired=True)
        remaining = entry.expires_at - self._clock()
        return CacheStats(
            size=len(entry.mappings),
            expires_in=max(0.0, remaining),
            is_expired=remaining <= 0,
        )

    async def test_resolution(self, address: str) -> ResolutionDiagnostics:
        """Resolve an address and report what the resolver saw."""
        domain = extract_domain(address)
        if domain is None:
            return ResolutionDiagnostics(
                address=address,
                domain=None,
                resolution=None,
                cache=self.cache_stats(),
                error="Address has no domain part",
            )
        resolution = await self.resolve(address)
        return ResolutionDiagnostics(
            address=address,
            domain=domain,
            resolution=resolution,
            cache=self.cache_stats(),
        )

    async def refresh(self) -> Mapping[str, Resolution]:
        """Rebuild the map from the store and swap it in."""
        try:
            rows = await self._source.list_active()
        except Exception as e:
            if self._last_good is None:
                logger.error("Domain mappings could not be loaded", error=str(e))
                raise StoreUnavailableError("Domain mappings could not be loaded") from e
            logger.warning(
                "Domain cache refresh failed, serving last good mappings",
                error=str(e),
                size=len(self._last_good),
                retry_seconds=self.retry_seconds,
            )
            self._entry = _CacheEntry(mappings=self._last_good, expires_at=self._clock() + self.retry_seconds)
            return self._last_good

        mappings: dict[str, Resolution] = {}
        for row in rows:
            key = row.domain.lower()
            if not row.is_active or key in mappings:
                continue
            mappings[key] = Resolution(
                account_id=row.account_id,
                domain=key,
                priority=row.priority,
                exact_match=True,
            )

        frozen = MappingProxyType(mappings)
        self._entry = _CacheEntry(mappings=frozen, expires_at=self._clock() + self.ttl_seconds)
        self._last_good = frozen
        logger.debug("Domain cache rebuilt", size=len(frozen), ttl_seconds=self.ttl_seconds)
        return frozen

    async def _current_mappings(self) -> Mapping[str, Resolution]:
        entry = self._entry
        if entry is not None and self._clock() < entry.expires_at:
            return entry.mappings
        return await self.refresh()
