"""
Pytest configuration and shared fixtures
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from cms_admin.database import Base, get_db
from cms_admin.models import menu, page  # noqa
from cms_admin.security.auth import create_access_token
from cms_admin.main import app
from menutree.types import MenuNode, PageType, ROOT_ID, Site


@pytest.fixture(scope="function")
def db_engine():
    """In-memory database engine"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Database session"""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture(scope="function")
def client(db_session):
    """Test client bound to the in-memory database"""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ============== Auth fixtures ==============

@pytest.fixture
def admin_token():
    return create_access_token("admin-1")


@pytest.fixture
def auth_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}


# ============== Menu fixtures ==============

def _make_node(node_id, parent_id=ROOT_ID, depth=1, order=1, site=Site.WEB,
               enabled=None, path=None, page_type=PageType.DYNAMIC, label=None):
    """Build a MenuNode with sensible defaults."""
    return MenuNode(
        id=node_id,
        site=site,
        labels={"ko": label or node_id, "en": label or node_id},
        path=path if path is not None else node_id.lower(),
        depth=depth,
        parent_id=parent_id,
        order=order,
        enabled=enabled if enabled is not None else {"ko": True, "en": True},
        page_type=page_type,
    )


@pytest.fixture
def make_node():
    """Factory for MenuNode test data"""
    return _make_node


@pytest.fixture
def abcd_nodes():
    """A(1) -> [B(1) -> [D(1)], C(2)], every node enabled in both locales"""
    return [
        _make_node("A", depth=1, order=1),
        _make_node("B", parent_id="A", depth=2, order=1),
        _make_node("C", parent_id="A", depth=2, order=2),
        _make_node("D", parent_id="B", depth=3, order=1),
    ]
