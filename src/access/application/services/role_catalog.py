"""
RoleCatalog - read access to role templates
"""
from __future__ import annotations

from typing import Iterable
from uuid import UUID

from access.domain.entities.role_template import RoleTemplate
from access.domain.exceptions import RoleNotFoundError
from access.domain.protocols.role_template_repository_protocol import IRoleTemplateRepository
from access.domain.value_objects.permission import Permission
from access.domain.value_objects.scope import PrincipalKind


class RoleCatalog:
    """
    Looks up role templates, remembering what it has loaded.

    One catalog serves one request; templates are not cached across requests.
    """

    def __init__(self, roles: IRoleTemplateRepository) -> None:
        self._roles = roles
        self._loaded: dict[UUID, RoleTemplate] = {}

    async def get(self, role_id: UUID) -> RoleTemplate:
        template = self._loaded.get(role_id)
        if template is None:
            template = await self._roles.get_by_id(role_id)
            if template is None:
                raise RoleNotFoundError(role_id)
            self._loaded[role_id] = template
        return template

    async def get_many(self, role_ids: Iterable[UUID]) -> dict[UUID, RoleTemplate]:
        """
        Load every requested template with a single query.

        Raises:
            RoleNotFoundError: If any id has no template
        """
        wanted = list(dict.fromkeys(role_ids))
        missing = [r for r in wanted if r not in self._loaded]
        if missing:
            for template in await self._roles.get_by_ids(missing):
                self._loaded[template.id] = template
        for role_id in wanted:
            if role_id not in self._loaded:
                raise RoleNotFoundError(role_id)
        return {role_id: self._loaded[role_id] for role_id in wanted}

    async def permissions_for(self, role_id: UUID) -> frozenset[Permission]:
        return (await self.get(role_id)).permissions

    async def grants_all(self, role_id: UUID) -> bool:
        return (await self.get(role_id)).grants_all

    async def is_assignable(self, role_id: UUID, principal_kind: PrincipalKind) -> bool:
        return (await self.get(role_id)).assignable_to(principal_kind)
