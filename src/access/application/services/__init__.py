from access.application.services.domain_mapping_service import (
    DomainMappingService,
    ImportedDomain,
    LegacyImportReport,
    SkippedDomain,
    SkipReason,
)
from access.application.services.domain_resolver import CacheStats, DomainResolver, ResolutionDiagnostics
from access.application.services.permission_engine import PermissionEngine
from access.application.services.role_catalog import RoleCatalog

__all__ = [
    "CacheStats",
    "DomainMappingService",
    "DomainResolver",
    "ImportedDomain",
    "LegacyImportReport",
    "PermissionEngine",
    "ResolutionDiagnostics",
    "RoleCatalog",
    "SkippedDomain",
    "SkipReason",
]
