"""
Shared fixtures: a throwaway in-memory database, seeded platform data and
a Flask test client wired to it.
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from db import init_db
from models import (
    ConfigEntry,
    ContentType,
    Extension,
    Node,
    Role,
    SystemRequirement,
    Term,
    User,
    UserRole,
    Vocabulary,
)

API_KEY = "abc123"


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine)


def seed_platform(session):
    session.add_all([
        Extension(key="admin_toolbar", name="Admin Toolbar", version="3.4.1",
                  origin="contrib", installed=True),
        Extension(key="pathauto", name="Pathauto", version=None,
                  origin="contrib", installed=False),
        Extension(key="node", name="Node", version="10.1.0",
                  origin="core", installed=True),
        Extension(key="old_thing", name="Old Thing", version="1.0",
                  origin="contrib", obsolete=True, installed=True),
    ])

    session.add_all([
        ContentType(id="article", label="Article"),
        ContentType(id="page", label="Basic page"),
    ])
    session.flush()
    session.add_all([
        Node(type="article", title="One"),
        Node(type="article", title="Two"),
        Node(type="page", title="About"),
    ])

    session.add_all([
        Role(id="anonymous", label="Anonymous user", weight=0),
        Role(id="authenticated", label="Authenticated user", weight=1),
        Role(id="editor", label="Editor", weight=2),
        Role(id="administrator", label="Administrator", weight=3),
    ])
    alice, bob = User(name="alice"), User(name="bob")
    session.add_all([alice, bob])
    session.flush()
    session.add_all([
        UserRole(uid=alice.uid, role_id="editor"),
        UserRole(uid=bob.uid, role_id="editor"),
        UserRole(uid=alice.uid, role_id="administrator"),
        UserRole(uid=bob.uid, role_id="authenticated"),
    ])

    session.add_all([
        Vocabulary(vid="tags", label="Tags", weight=0),
        Vocabulary(vid="topics", label="Topics", weight=1),
    ])
    session.flush()
    session.add_all([
        Term(vid="tags", name="python"),
        Term(vid="tags", name="flask"),
        Term(vid="tags", name="sqlalchemy"),
    ])

    session.add_all([
        SystemRequirement(component="drupal", value="10.1.0"),
        SystemRequirement(component="cron", value="Last run 3 minutes ago"),
        SystemRequirement(component="php", value="8.1.0 (cli)"),
        SystemRequirement(component="database_system", value="mysql"),
        SystemRequirement(component="database_system_version", value="8.0-ubuntu0.22.04.1"),
        SystemRequirement(component="webserver", value="apache"),
    ])
    session.commit()


def set_api_key(session, value):
    session.merge(ConfigEntry(collection="idp_insights.settings", name="api_key", value=value))
    session.commit()


@pytest.fixture
def seeded(session_factory):
    session = session_factory()
    try:
        seed_platform(session)
        set_api_key(session, API_KEY)
    finally:
        session.close()
    return session_factory


@pytest.fixture
def app(engine, seeded):
    from app import create_app

    application = create_app(session_factory=seeded, bind=engine)
    application.config["TESTING"] = True
    return application


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c
