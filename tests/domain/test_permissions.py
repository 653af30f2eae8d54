"""Tests for catalogue permissions."""

import pytest

from catalogue_admin.domain.permissions import (
    ADD_TAGS,
    ADMIN,
    PERMISSION_CODES,
    Action,
    CataloguePermissions,
    EntityKind,
    InMemoryPermissionChecker,
    provide_permissions,
)
from catalogue_admin.domain.value_objects import Member, SiteConfig, ViewAccess


@pytest.fixture
def checker() -> InMemoryPermissionChecker:
    return InMemoryPermissionChecker({1: {ADMIN}})


@pytest.fixture
def permissions(checker: InMemoryPermissionChecker) -> CataloguePermissions:
    return CataloguePermissions(checker)


class TestCataloguePermissions:
    """Tests for CataloguePermissions."""

    def test_admin_can_do_everything(self, permissions: CataloguePermissions) -> None:
        admin = Member(id=1)
        for kind in EntityKind:
            assert permissions.can_create(admin, kind)
            assert permissions.can_edit(admin, kind)
            assert permissions.can_delete(admin, kind)
        assert permissions.can_create_tags(admin)

    def test_anonymous_denied(self, permissions: CataloguePermissions) -> None:
        assert not permissions.can_create(None)
        assert not permissions.can_create_tags(None)

    def test_per_action_code(
        self,
        checker: InMemoryPermissionChecker,
        permissions: CataloguePermissions,
    ) -> None:
        """A specific code grants only its own action."""
        editor = Member(id=2)
        checker.grant(2, PERMISSION_CODES[(EntityKind.PRODUCT, Action.EDIT)])

        assert permissions.can_edit(editor)
        assert not permissions.can_delete(editor)
        assert not permissions.can_edit(editor, EntityKind.CATEGORY)

    def test_revoke(
        self,
        checker: InMemoryPermissionChecker,
        permissions: CataloguePermissions,
    ) -> None:
        checker.grant(3, ADD_TAGS)
        assert permissions.can_create_tags(Member(id=3))
        checker.revoke(3, ADD_TAGS)
        assert not permissions.can_create_tags(Member(id=3))

    def test_view_follows_site_config(self, permissions: CataloguePermissions) -> None:
        config = SiteConfig(can_view_type=ViewAccess.LOGGED_IN_USERS)
        assert permissions.can_view(Member(id=9), config)
        assert not permissions.can_view(None, config)


def test_every_code_has_definition() -> None:
    """Each action code and the tag code is described."""
    definitions = provide_permissions()
    for code in PERMISSION_CODES.values():
        assert code in definitions
    assert ADD_TAGS in definitions
