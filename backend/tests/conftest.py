"""
Workhive - Test Configuration and Fixtures
"""
import os
from typing import AsyncGenerator, Callable, Dict, List, Optional

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from faker import Faker

# Set testing environment before the app reads its settings
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite://'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['LOG_FILE'] = ''

from app.main import app
from app.core.database import Base, get_db, json_serializer
from app.core.security import create_access_token
from app.models.task import TaskPriority
from app.models.template import ProjectTemplate, TemplateCategory, TemplateTask
from app.models.user import User
from app.models.workspace import Workspace

fake = Faker()

# In-memory SQLite; StaticPool keeps the one connection so every session sees the same data
TEST_DATABASE_URL = 'sqlite+aiosqlite://'


@pytest.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Fresh database and session for each test"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        json_serializer=json_serializer,
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session
        await session.rollback()

    await engine.dispose()


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def unguarded_client(client: AsyncClient) -> AsyncGenerator[AsyncClient, None]:
    """
    Client that returns the 500 response instead of re-raising.
    Starlette re-raises unhandled errors after the global handler has answered.
    """
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac


async def _create_user(db_session: AsyncSession, **overrides) -> User:
    user = User(
        email=overrides.pop('email', fake.unique.email()),
        full_name=overrides.pop('full_name', fake.name()),
        is_active=overrides.pop('is_active', True),
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


def _auth_headers(user: User) -> Dict[str, str]:
    token = create_access_token({'sub': str(user.id), 'email': user.email})
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a test user"""
    return await _create_user(db_session)


@pytest.fixture
async def other_user(db_session: AsyncSession) -> User:
    """A second user, for ownership checks"""
    return await _create_user(db_session)


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    """Generate authentication headers for test user"""
    return _auth_headers(test_user)


@pytest.fixture
def other_auth_headers(other_user: User) -> dict:
    return _auth_headers(other_user)


@pytest.fixture
async def workspace(db_session: AsyncSession, test_user: User) -> Workspace:
    """Workspace owned by the test user"""
    ws = Workspace(user_id=test_user.id, name=fake.company())
    db_session.add(ws)
    await db_session.commit()
    await db_session.refresh(ws)
    return ws


@pytest.fixture
def make_template(db_session: AsyncSession, test_user: User) -> Callable:
    """
    Factory inserting a template and its tasks directly.

    `tasks` is a list of dicts with at least `order`; title, daysFromStart
    and priority get defaults.
    """
    async def _make(
        tasks: Optional[List[dict]] = None,
        created_by: Optional[str] = None,
        **fields,
    ) -> ProjectTemplate:
        template = ProjectTemplate(
            name=fields.pop('name', 'Website Launch'),
            description=fields.pop('description', 'Everything needed to ship a marketing site'),
            category=fields.pop('category', TemplateCategory.WEB_DEVELOPMENT),
            created_by=created_by or test_user.id,
            is_public=fields.pop('is_public', True),
            tags=fields.pop('tags', ['web', 'launch']),
            estimated_duration=fields.pop('estimated_duration', 14),
            **fields,
        )
        db_session.add(template)
        await db_session.flush()

        for task_def in tasks or []:
            db_session.add(
                TemplateTask(
                    template_id=template.id,
                    title=task_def.get('title', f"Task {task_def['order']}"),
                    description=task_def.get('description', ''),
                    priority=task_def.get('priority', TaskPriority.MEDIUM),
                    estimated_hours=task_def.get('estimated_hours', 1.0),
                    order=task_def['order'],
                    days_from_start=task_def.get('days_from_start', 0),
                    dependencies=task_def.get('dependencies', []),
                )
            )
        await db_session.commit()
        await db_session.refresh(template)
        return template

    return _make
