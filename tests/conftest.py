"""
Pytest configuration and shared fixtures.

The app runs against an in-memory SQLite database (aiosqlite) that every
session of a test shares through a StaticPool; the request database
dependency is overridden to use it.
"""
import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-with-at-least-32-bytes"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime
from typing import Iterable, Optional

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from lms_admin.dependencies.db import get_database
from lms_admin.main import app
from lms_admin.model import (
    Base,
    Chapter,
    Course,
    CourseTeamMember,
    Lecture,
    Permission,
    Role,
    StaffPermission,
    User,
)
from lms_admin.utils.security import hash_password

JWT_SECRET = os.environ["JWT_SECRET_KEY"]


# ==================== Database ====================

@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Session used to arrange test data"""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_database():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_database] = override_get_database
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def count_rows(session_factory):
    """Counts rows with a fresh session, after requests have committed"""

    async def count(model, *conditions) -> int:
        async with session_factory() as session:
            query = select(func.count()).select_from(model)
            if conditions:
                query = query.where(*conditions)
            return (await session.execute(query)).scalar()

    return count


@pytest.fixture
def fetch(session_factory):
    """Loads one row with a fresh session"""

    async def load(model, id, *options):
        async with session_factory() as session:
            return await session.get(model, id, options=list(options))

    return load


# ==================== Auth ====================

def auth_headers(user: User, **extra) -> dict:
    token = jwt.encode({"userId": user.id}, JWT_SECRET, algorithm="HS256")
    return {"Authorization": f"Bearer {token}", **extra}


@pytest.fixture
def auth():
    """Builds request headers authenticating as a user"""
    return auth_headers


# ==================== Data builders ====================

class Seeder:
    """Inserts and commits rows for a test"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, *objects):
        self.session.add_all(objects)
        await self.session.commit()
        return objects[0] if len(objects) == 1 else objects

    async def permissions(self, names: Iterable[str]) -> list[Permission]:
        permissions = [Permission(name=name) for name in names]
        self.session.add_all(permissions)
        await self.session.commit()
        return permissions

    async def role(
            self,
            name: str,
            custom_role: bool = False,
            permissions: Iterable[Permission] = (),
    ) -> Role:
        return await self.add(Role(name=name, custom_role=custom_role, permissions=list(permissions)))

    async def user(
            self,
            name: str,
            email: str,
            roles: Iterable[Role] = (),
            deleted: bool = False,
            password: str = "secret-password",
    ) -> User:
        slug = email.split("@")[0].replace(".", "-")
        user = User(
            name=name,
            email=email,
            password=hash_password(password),
            slug=slug,
            is_active=True,
            roles=list(roles),
            deleted_at=datetime(2026, 1, 1) if deleted else None,
        )
        return await self.add(user)

    async def course(self, owner: User, title: str = "Python 101") -> Course:
        slug = f"{title.lower().replace(' ', '-')}-{owner.id}"
        return await self.add(Course(user_id=owner.id, title=title, slug=slug))

    async def team_member(self, course: Course, user: User) -> CourseTeamMember:
        return await self.add(CourseTeamMember(course_id=course.id, user_id=user.id))

    async def chapter(self, course: Course, title: str = "Getting started", order: int = 1) -> Chapter:
        return await self.add(Chapter(course_id=course.id, title=title, order=order))

    async def lecture(
            self,
            chapter: Chapter,
            title: str = "Lecture",
            type: str = "video",
            order: int = 0,
            content: Optional[object] = None,
    ) -> Lecture:
        lecture = await self.add(
            Lecture(course_chapter_id=chapter.id, title=title, type=type, order=order)
        )
        if content is not None:
            content.lecture_id = lecture.id
            await self.add(content)
        return lecture


@pytest.fixture
def seed(db_session) -> Seeder:
    return Seeder(db_session)


# ==================== Common actors ====================

@pytest_asyncio.fixture
async def course_owner(seed) -> User:
    return await seed.user("Olivia Owner", "owner@example.com")


@pytest_asyncio.fixture
async def outsider(seed) -> User:
    return await seed.user("Oscar Outsider", "outsider@example.com")


@pytest_asyncio.fixture
async def course(seed, course_owner) -> Course:
    return await seed.course(course_owner)


@pytest_asyncio.fixture
async def chapter(seed, course) -> Chapter:
    return await seed.chapter(course)


@pytest_asyncio.fixture
async def staff_permissions(seed) -> dict[str, Permission]:
    permissions = await seed.permissions(p.value for p in StaffPermission)
    return {permission.name: permission for permission in permissions}


@pytest_asyncio.fixture
async def super_admin_role(seed, staff_permissions) -> Role:
    return await seed.role("Super Admin", permissions=staff_permissions.values())


@pytest_asyncio.fixture
async def staff_role(seed) -> Role:
    return await seed.role("Staff")


@pytest_asyncio.fixture
async def editor_role(seed) -> Role:
    return await seed.role("Editor", custom_role=True)


@pytest_asyncio.fixture
async def support_role(seed) -> Role:
    return await seed.role("Support", custom_role=True)


@pytest_asyncio.fixture
async def admin(seed, super_admin_role) -> User:
    return await seed.user("Ada Admin", "admin@example.com", roles=[super_admin_role])
