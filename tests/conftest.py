"""Pytest configuration and fixtures for the AgriTrack policy engine.

Unit tests run against in-memory repositories (FakeStore) shared through a
fake unit of work with real commit/rollback semantics. HTTP tests use
app.main:app with dependency overrides. DB-dependent fixtures skip when
DATABASE_URL is not configured.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("PRINCIPAL_REGIONS_SOURCE", "token")

from collections.abc import Iterable
from dataclasses import dataclass, field

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.domain.entities import ActivityEntity, Principal, SiteEntity, UserEntity
from app.domain.enums import ActivityStatus, Role
from app.domain.exceptions import InfrastructureException
from app.infrastructure.persistence.database import get_session_factory
from app.main import app


@dataclass
class FakeStore:
    """In-memory tables: users, sites, activities and assignment edges."""

    users: dict[int, UserEntity] = field(default_factory=dict)
    sites: dict[int, SiteEntity] = field(default_factory=dict)
    activities: dict[int, ActivityEntity] = field(default_factory=dict)
    edges: set[tuple[int, int]] = field(default_factory=set)
    commits: int = 0
    rollbacks: int = 0
    fail_reads: bool = False

    def add_user(self, id: int, role: Role, region_ids: Iterable[int] = (), **kw) -> UserEntity:
        user = UserEntity(id=id, role=role, region_ids=frozenset(region_ids), **kw)
        self.users[id] = user
        return user

    def add_site(self, id: int, region_id: int, name: str = "") -> SiteEntity:
        site = SiteEntity(id=id, region_id=region_id, name=name or f"Site {id}")
        self.sites[id] = site
        return site

    def add_activity(
        self,
        id: int,
        site_id: int,
        created_by_id: int,
        status: ActivityStatus = ActivityStatus.EN_ATTENTE,
    ) -> ActivityEntity:
        activity = ActivityEntity(
            id=id,
            region_id=self.sites[site_id].region_id,
            site_id=site_id,
            created_by_id=created_by_id,
            status=status,
        )
        self.activities[id] = activity
        return activity

    def assigned(self, user_id: int) -> frozenset[int]:
        return frozenset(s for u, s in self.edges if u == user_id)


class FakeSiteRepo:
    def __init__(self, store: FakeStore, edges: set[tuple[int, int]]) -> None:
        self.store = store
        self.edges = edges

    def _with_assignments(self, site: SiteEntity) -> SiteEntity:
        users = frozenset(u for u, s in self.edges if s == site.id)
        return SiteEntity(site.id, site.region_id, site.name, users)

    async def get_by_id(self, site_id: int) -> SiteEntity | None:
        if self.store.fail_reads:
            raise InfrastructureException("timeout", collaborator="database")
        site = self.store.sites.get(site_id)
        return self._with_assignments(site) if site else None

    async def get_by_ids(self, site_ids: Iterable[int]) -> list[SiteEntity]:
        if self.store.fail_reads:
            raise InfrastructureException("timeout", collaborator="database")
        return [
            self._with_assignments(self.store.sites[i])
            for i in sorted(set(site_ids))
            if i in self.store.sites
        ]

    async def count_activities(self, site_id: int) -> int:
        return sum(1 for a in self.store.activities.values() if a.site_id == site_id)


class FakeActivityRepo:
    def __init__(self, store: FakeStore) -> None:
        self.store = store

    async def get_by_id(self, activity_id: int) -> ActivityEntity | None:
        return self.store.activities.get(activity_id)


class FakeUserRepo:
    def __init__(self, store: FakeStore) -> None:
        self.store = store

    async def get_by_id(self, user_id: int) -> UserEntity | None:
        if self.store.fail_reads:
            raise InfrastructureException("timeout", collaborator="database")
        return self.store.users.get(user_id)

    async def list_region_ids(self, user_id: int) -> frozenset[int]:
        user = self.store.users.get(user_id)
        return user.region_ids if user else frozenset()


class FakeAssignmentRepo:
    """Writes go to the unit of work's staged edge set."""

    def __init__(self, edges: set[tuple[int, int]]) -> None:
        self.edges = edges

    async def get_assigned_site_ids(self, user_id: int) -> frozenset[int]:
        return frozenset(s for u, s in self.edges if u == user_id)

    async def get_assigned_user_ids(self, site_id: int) -> frozenset[int]:
        return frozenset(u for u, s in self.edges if s == site_id)

    async def replace_assignments(self, user_id: int, site_ids: frozenset[int]) -> None:
        for edge in [e for e in self.edges if e[0] == user_id]:
            self.edges.discard(edge)
        self.edges.update((user_id, s) for s in site_ids)

    async def remove_assignment(self, user_id: int, site_id: int) -> bool:
        if (user_id, site_id) in self.edges:
            self.edges.discard((user_id, site_id))
            return True
        return False


class FakeUnitOfWork:
    """Stages edge writes on a copy; publishes them only on commit."""

    def __init__(self, store: FakeStore) -> None:
        self.store = store

    async def __aenter__(self) -> "FakeUnitOfWork":
        self._staged = set(self.store.edges)
        self._committed = False
        self.sites = FakeSiteRepo(self.store, self._staged)
        self.activities = FakeActivityRepo(self.store)
        self.users = FakeUserRepo(self.store)
        self.assignments = FakeAssignmentRepo(self._staged)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc_type is None and self._committed:
            self.store.edges = self._staged
            self.store.commits += 1
        else:
            self.store.rollbacks += 1

    async def commit(self) -> None:
        self._committed = True


@pytest.fixture
def store() -> FakeStore:
    """Two regions (7, 9) with one user per role and three sites.

    Users: 1 superadmin, 2 admin {7}, 3 superviseur {7}, 4 conseiller {7},
    5 admin {9}, 6 superviseur {}, 8 conseiller {} (no region).
    Sites: 10 and 11 in region 7, 20 in region 9.
    """
    s = FakeStore()
    s.add_user(1, Role.SUPERADMIN)
    s.add_user(2, Role.ADMIN, {7})
    s.add_user(3, Role.SUPERVISEUR, {7})
    s.add_user(4, Role.CONSEILLER, {7})
    s.add_user(5, Role.ADMIN, {9})
    s.add_user(6, Role.SUPERVISEUR)
    s.add_user(8, Role.CONSEILLER)
    s.add_site(10, 7, "Parcelle A")
    s.add_site(11, 7, "Parcelle B")
    s.add_site(20, 9, "Parcelle C")
    return s


@pytest.fixture
def uow_factory(store: FakeStore):
    """Zero-argument factory returning a fresh FakeUnitOfWork over store."""
    return lambda: FakeUnitOfWork(store)


@pytest.fixture
def principals(store: FakeStore) -> dict[str, Principal]:
    """Principals for the store's users, keyed by a short label."""
    labels = {
        "superadmin": 1,
        "admin": 2,
        "superviseur": 3,
        "conseiller": 4,
        "admin_other": 5,
        "superviseur_empty": 6,
        "conseiller_empty": 8,
    }
    return {label: store.users[uid].to_principal() for label, uid in labels.items()}


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for repository/integration tests. Rolls back after test.

    Requires DATABASE_URL with the schema migrated. Skips (pytest.skip) when
    Postgres is not configured. Use @pytest.mark.requires_db to mark tests
    that need this fixture; run without DB via: pytest -m 'not requires_db'.
    """
    if not get_settings().sql_configured:
        pytest.skip(
            "Postgres not configured: set DATABASE_URL, then run: alembic upgrade head"
        )
    async with get_session_factory()() as session:
        yield session
        await session.rollback()
