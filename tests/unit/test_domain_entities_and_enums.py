"""Tests for domain entities (Principal, SiteEntity, ActivityEntity, UserEntity) and enums."""

import pytest

from app.domain.entities import ActivityEntity, Principal, SiteEntity, UserEntity
from app.domain.enums import ActivityStatus, Role, UserStatus
from app.domain.exceptions import ValidationException


class TestRole:
    def test_values_returns_all_roles(self) -> None:
        assert Role.values() == ["superadmin", "admin", "superviseur", "conseiller"]

    def test_admin_tier(self) -> None:
        assert Role.SUPERADMIN.is_admin_tier
        assert Role.ADMIN.is_admin_tier
        assert not Role.SUPERVISEUR.is_admin_tier
        assert not Role.CONSEILLER.is_admin_tier


class TestActivityStatus:
    def test_only_pending_is_not_terminal(self) -> None:
        assert not ActivityStatus.EN_ATTENTE.is_terminal
        assert ActivityStatus.APPROUVE.is_terminal
        assert ActivityStatus.REJETE.is_terminal


class TestPrincipal:
    def test_of_coerces_role_and_regions(self) -> None:
        principal = Principal.of(4, "conseiller", [7, 7, 9])
        assert principal.role is Role.CONSEILLER
        assert principal.region_ids == frozenset({7, 9})
        assert principal.is_role(Role.CONSEILLER, Role.ADMIN)

    def test_unknown_role_raises(self) -> None:
        with pytest.raises(ValidationException) as exc_info:
            Principal.of(4, "inspecteur")
        assert exc_info.value.details["field"] == "role"

    def test_is_immutable(self) -> None:
        principal = Principal.of(1, Role.ADMIN, {7})
        with pytest.raises(AttributeError):
            principal.role = Role.SUPERADMIN  # type: ignore[misc]


class TestSiteEntity:
    def test_requires_region(self) -> None:
        with pytest.raises(ValidationException):
            SiteEntity(id=1, region_id=None)  # type: ignore[arg-type]

    def test_is_assigned_to(self) -> None:
        site = SiteEntity(id=1, region_id=7, assigned_user_ids=[4])
        assert site.is_assigned_to(4)
        assert not site.is_assigned_to(8)


class TestActivityEntity:
    def test_defaults_to_pending(self) -> None:
        activity = ActivityEntity(id=1, region_id=7, site_id=10, created_by_id=4)
        assert activity.is_pending
        assert not activity.is_finalized
        assert activity.was_created_by(4)

    def test_status_string_coerced(self) -> None:
        activity = ActivityEntity(1, 7, 10, 4, "approuve")
        assert activity.status is ActivityStatus.APPROUVE
        assert activity.is_finalized

    def test_unknown_status_raises(self) -> None:
        with pytest.raises(ValidationException):
            ActivityEntity(1, 7, 10, 4, "archive")


class TestUserEntity:
    def test_to_principal(self) -> None:
        user = UserEntity(id=4, role="conseiller", region_ids=[7])
        assert user.to_principal() == Principal.of(4, Role.CONSEILLER, {7})

    def test_only_actif_is_active(self) -> None:
        assert UserEntity(id=1, role=Role.ADMIN).is_active
        assert not UserEntity(id=1, role=Role.ADMIN, status="suspendu").is_active
        assert not UserEntity(id=1, role=Role.ADMIN, status=UserStatus.INACTIF).is_active

    def test_has_any_region(self) -> None:
        user = UserEntity(id=1, role=Role.ADMIN, region_ids={7, 8})
        assert user.has_any_region(frozenset({8, 9}))
        assert not user.has_any_region(frozenset({9}))
