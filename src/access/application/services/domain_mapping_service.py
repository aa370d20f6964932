"""
DomainMappingService - validated writes to domain mappings and legacy import
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence
from uuid import UUID, uuid4

from shared.infrastructure.observability.logger import get_logger

from access.application.services.domain_resolver import DomainResolver
from access.domain.entities.domain_mapping import DomainMapping
from access.domain.exceptions import (
    AccountNotFoundError,
    DomainMappingNotFoundError,
    DuplicateDomainError,
)
from access.domain.protocols.unit_of_work_protocol import IAccessUnitOfWork
from access.domain.services.domain_names import is_valid_domain, normalize_domain, parse_legacy_domains

logger = get_logger(__name__)


class SkipReason(str, Enum):
    INVALID = "invalid"
    DUPLICATE = "duplicate"


@dataclass(frozen=True)
class ImportedDomain:
    account_id: UUID
    account_name: str
    domain: str
    mapping_id: UUID


@dataclass(frozen=True)
class SkippedDomain:
    account_id: UUID
    account_name: str
    domain: str
    reason: SkipReason


@dataclass
class LegacyImportReport:
    imported: list[ImportedDomain] = field(default_factory=list)
    skipped: list[SkippedDomain] = field(default_factory=list)
    accounts_scanned: int = 0


class DomainMappingService:
    """
    Creates, edits and removes domain mappings.

    Every input is validated before anything is written, and every committed
    write invalidates the resolver cache.
    """

    def __init__(self, uow: IAccessUnitOfWork, resolver: DomainResolver) -> None:
        self.uow = uow
        self._resolver = resolver

    async def list_all(self) -> Sequence[DomainMapping]:
        async with self.uow:
            return await self.uow.domain_mappings.list_all()

    async def create(
        self,
        domain: str,
        account_id: UUID,
        priority: int = 0,
        is_active: bool = True,
    ) -> DomainMapping:
        """
        Add a mapping.

        Raises:
            InvalidDomainError: If the domain is not a valid hostname
            DuplicateDomainError: If the domain is already mapped
            AccountNotFoundError: If the account does not exist
        """
        normalized = normalize_domain(domain)

        async with self.uow:
            if await self.uow.accounts.get_by_id(account_id) is None:
                raise AccountNotFoundError(account_id)
            if await self.uow.domain_mappings.get_by_domain(normalized) is not None:
                raise DuplicateDomainError(normalized)

            mapping = await self.uow.domain_mappings.add(DomainMapping(
                id=uuid4(),
                domain=normalized,
                account_id=account_id,
                priority=priority,
                is_active=is_active,
            ))
            await self.uow.commit()

        self._resolver.invalidate_cache()
        logger.info(
            "Domain mapping created",
            mapping_id=str(mapping.id),
            domain=normalized,
            account_id=str(account_id),
            priority=priority,
        )
        return mapping

    async def update(
        self,
        mapping_id: UUID,
        *,
        domain: Optional[str] = None,
        account_id: Optional[UUID] = None,
        priority: Optional[int] = None,
        is_active: Optional[bool] = None,
    ) -> DomainMapping:
        """Change any subset of a mapping's fields."""
        normalized = normalize_domain(domain) if domain is not None else None

        async with self.uow:
            mapping = await self.uow.domain_mappings.get_by_id(mapping_id)
            if mapping is None:
                raise DomainMappingNotFoundError(mapping_id)

            if normalized is not None and normalized != mapping.domain:
                if await self.uow.domain_mappings.get_by_domain(normalized) is not None:
                    raise DuplicateDomainError(normalized)
            if account_id is not None and await self.uow.accounts.get_by_id(account_id) is None:
                raise AccountNotFoundError(account_id)

            mapping.change(
                domain=normalized,
                account_id=account_id,
                priority=priority,
                is_active=is_active,
            )
            mapping = await self.uow.domain_mappings.update(mapping)
            await self.uow.commit()

        self._resolver.invalidate_cache()
        logger.info("Domain mapping updated", mapping_id=str(mapping_id), domain=mapping.domain)
        return mapping

    async def delete(self, mapping_id: UUID) -> None:
        async with self.uow:
            if not await self.uow.domain_mappings.delete(mapping_id):
                raise DomainMappingNotFoundError(mapping_id)
            await self.uow.commit()

        self._resolver.invalidate_cache()
        logger.info("Domain mapping deleted", mapping_id=str(mapping_id))

    async def import_legacy_domains(self) -> LegacyImportReport:
        """
        Turn the deprecated `legacy_domains` text of each account into mappings.

        Accounts that already have a structured mapping are left alone.
        Domains are committed one at a time; invalid and already-mapped
        domains are reported as skipped and never overwrite anything.
        """
        report = LegacyImportReport()

        async with self.uow:
            accounts = await self.uow.accounts.find_with_legacy_domains()
            already_mapped = await self.uow.domain_mappings.account_ids_with_mappings()

        for account in accounts:
            if account.id in already_mapped:
                continue
            report.accounts_scanned += 1

            for domain in parse_legacy_domains(account.legacy_domains):
                if not is_valid_domain(domain):
                    report.skipped.append(SkippedDomain(account.id, account.name, domain, SkipReason.INVALID))
                    continue

                async with self.uow:
                    if await self.uow.domain_mappings.get_by_domain(domain) is not None:
                        report.skipped.append(
                            SkippedDomain(account.id, account.name, domain, SkipReason.DUPLICATE)
                        )
                        continue
                    mapping = await self.uow.domain_mappings.add(
                        DomainMapping(id=uuid4(), domain=domain, account_id=account.id, priority=0)
                    )
                    await self.uow.commit()

                report.imported.append(ImportedDomain(account.id, account.name, domain, mapping.id))

        if report.imported:
            self._resolver.invalidate_cache()

        logger.info(
            "Legacy domain import finished",
            accounts_scanned=report.accounts_scanned,
            imported=len(report.imported),
            skipped=len(report.skipped),
        )
        return report
