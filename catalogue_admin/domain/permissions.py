"""Catalogue permission policy.

Authorization is evaluated by a permission collaborator; this module
only knows which codes each action needs. Every check passes for a
member holding ``ADMIN`` or the named per-action code.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

import structlog

from catalogue_admin.domain.value_objects import Member, SiteConfig

logger = structlog.get_logger()

ADMIN = "ADMIN"


class EntityKind(str, Enum):
    """Kinds of catalogue records with their own permission codes."""

    PRODUCT = "product"
    CATEGORY = "category"


class Action(str, Enum):
    """Mutating actions guarded by permissions."""

    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"


PERMISSION_CODES: dict[tuple[EntityKind, Action], str] = {
    (EntityKind.PRODUCT, Action.CREATE): "CATALOGUE_ADD_PRODUCTS",
    (EntityKind.PRODUCT, Action.EDIT): "CATALOGUE_EDIT_PRODUCTS",
    (EntityKind.PRODUCT, Action.DELETE): "CATALOGUE_DELETE_PRODUCTS",
    (EntityKind.CATEGORY, Action.CREATE): "CATALOGUE_ADD_CATEGORIES",
    (EntityKind.CATEGORY, Action.EDIT): "CATALOGUE_EDIT_CATEGORIES",
    (EntityKind.CATEGORY, Action.DELETE): "CATALOGUE_DELETE_CATEGORIES",
}

ADD_TAGS = "CATALOGUE_ADD_TAGS"


@dataclass(frozen=True)
class PermissionDefinition:
    """Metadata describing a permission code for admin screens."""

    name: str
    help: str
    category: str = "Catalogue"
    sort: int = 0


def provide_permissions() -> dict[str, PermissionDefinition]:
    """List the permission codes this catalogue defines.

    Returns:
        Mapping of permission code to its definition.
    """
    return {
        "CATALOGUE_ADD_PRODUCTS": PermissionDefinition(
            name="Add products",
            help="Allow user to add products to catalogue",
            sort=50,
        ),
        "CATALOGUE_EDIT_PRODUCTS": PermissionDefinition(
            name="Edit products",
            help="Allow user to edit any product in catalogue",
            sort=100,
        ),
        "CATALOGUE_DELETE_PRODUCTS": PermissionDefinition(
            name="Delete products",
            help="Allow user to delete any product in catalogue",
            sort=150,
        ),
        "CATALOGUE_ADD_CATEGORIES": PermissionDefinition(
            name="Add categories",
            help="Allow user to add categories to catalogue",
            sort=200,
        ),
        "CATALOGUE_EDIT_CATEGORIES": PermissionDefinition(
            name="Edit categories",
            help="Allow user to edit any category in catalogue",
            sort=250,
        ),
        "CATALOGUE_DELETE_CATEGORIES": PermissionDefinition(
            name="Delete categories",
            help="Allow user to delete any category in catalogue",
            sort=300,
        ),
        ADD_TAGS: PermissionDefinition(
            name="Add tags",
            help="Allow user to create new product tags",
            sort=350,
        ),
    }


# ============================================================================
# Permission Collaborator
# ============================================================================


class PermissionChecker(ABC):
    """Evaluates whether a member holds any of a set of permission codes."""

    @abstractmethod
    def check_member(self, member_id: int | None, codes: Iterable[str]) -> bool:
        """Check a member against permission codes.

        Args:
            member_id: Member to check, None for anonymous callers.
            codes: Codes of which any one is sufficient.

        Returns:
            True if the member holds at least one code.
        """


class InMemoryPermissionChecker(PermissionChecker):
    """Permission checker backed by an in-process grant table."""

    def __init__(self, grants: dict[int, set[str]] | None = None) -> None:
        self._grants: dict[int, set[str]] = {
            member_id: set(codes) for member_id, codes in (grants or {}).items()
        }

    def grant(self, member_id: int, *codes: str) -> None:
        """Grant permission codes to a member."""
        self._grants.setdefault(member_id, set()).update(codes)

    def revoke(self, member_id: int, *codes: str) -> None:
        """Revoke permission codes from a member."""
        self._grants.get(member_id, set()).difference_update(codes)

    def check_member(self, member_id: int | None, codes: Iterable[str]) -> bool:
        if member_id is None:
            return False
        held = self._grants.get(member_id, set())
        return any(code in held for code in codes)


# ============================================================================
# Catalogue Permissions
# ============================================================================


class CataloguePermissions:
    """Permission checks for catalogue records.

    Example usage:
        checker = InMemoryPermissionChecker({1: {"ADMIN"}})
        permissions = CataloguePermissions(checker)
        permissions.can_edit(Member(id=1))  # True
    """

    def __init__(self, checker: PermissionChecker) -> None:
        self.checker = checker

    def can(
        self,
        action: Action,
        member: Member | None,
        kind: EntityKind = EntityKind.PRODUCT,
    ) -> bool:
        """Check a mutating action.

        Args:
            action: Action to check.
            member: Caller identity.
            kind: Kind of record acted on.

        Returns:
            True if the member may perform the action.
        """
        member_id = member.id if member is not None else None
        allowed = self.checker.check_member(
            member_id,
            [ADMIN, PERMISSION_CODES[(kind, action)]],
        )
        if not allowed:
            logger.info(
                "Permission denied",
                action=action.value,
                kind=kind.value,
                member_id=member_id,
            )
        return allowed

    def can_create(self, member: Member | None, kind: EntityKind = EntityKind.PRODUCT) -> bool:
        return self.can(Action.CREATE, member, kind)

    def can_edit(self, member: Member | None, kind: EntityKind = EntityKind.PRODUCT) -> bool:
        return self.can(Action.EDIT, member, kind)

    def can_delete(self, member: Member | None, kind: EntityKind = EntityKind.PRODUCT) -> bool:
        return self.can(Action.DELETE, member, kind)

    def can_create_tags(self, member: Member | None) -> bool:
        """Determine whether a member can create new tags."""
        member_id = member.id if member is not None else None
        return self.checker.check_member(member_id, [ADMIN, ADD_TAGS])

    def can_view(self, member: Member | None, site_config: SiteConfig) -> bool:
        """Viewing is governed by the site configuration, not by codes."""
        return site_config.can_view_pages(member)
