"""Pytest fixtures for the profile API tests.

Each test gets a fresh SQLite database (via aiosqlite) created by the app's
own startup hook.
"""
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event

from me_api.api import create_app
from me_api.config import DatabaseSettings, LoggingSettings, Settings


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        db=DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'me_api_test.db'}"),
        logging=LoggingSettings(level="WARNING", format="text"),
    )


@pytest.fixture
def client(test_settings) -> Iterator[TestClient]:
    app = create_app(test_settings)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def sql_statements(client) -> Iterator[list[str]]:
    """Record every SQL statement sent to the test database."""
    statements: list[str] = []
    engine = client.app.state.engine.sync_engine

    def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(engine, "before_cursor_execute", before_cursor_execute)
    yield statements
    event.remove(engine, "before_cursor_execute", before_cursor_execute)


def _create(client: TestClient, path: str, payload: dict) -> dict:
    resp = client.post(path, json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


@pytest.fixture
def seeded(client) -> dict:
    """Sample portfolio created through the API. Returns ids by name."""
    profile = _create(
        client,
        "/api/profile",
        {
            "name": "Ada Lovelace",
            "email": "ada@example.com",
            "education": "B.Sc. Computer Science",
            "github": "https://github.com/ada",
        },
    )

    skills = {}
    for name, proficiency, category in [
        ("Python", 5, "Backend"),
        ("React", 4, "Frontend"),
        ("FastAPI", 4, "Backend"),
        ("PostgreSQL", 3, "Database"),
        ("Docker", 2, "Backend Tools"),
    ]:
        skills[name] = _create(
            client,
            "/api/skills",
            {"name": name, "proficiency": proficiency, "category": category},
        )["id"]

    projects = {}
    for title, description, skill_names in [
        ("React Native", "Mobile app built with React Native", ["React"]),
        ("React", "Component library", ["React"]),
        ("Portfolio API", "FastAPI service backed by PostgreSQL", ["Python", "FastAPI", "PostgreSQL"]),
    ]:
        projects[title] = _create(
            client,
            "/api/projects",
            {
                "title": title,
                "description": description,
                "skill_ids": [skills[n] for n in skill_names],
            },
        )["id"]

    work = {}
    for company, position, description, start, end, current in [
        ("Acme Corp", "Backend Engineer", "Built Python services", "2021-01-01", None, True),
        ("Globex", "Frontend Developer", "React dashboards", "2018-06-01", "2020-12-31", False),
    ]:
        work[company] = _create(
            client,
            "/api/work",
            {
                "company": company,
                "position": position,
                "description": description,
                "start_date": start,
                "end_date": end,
                "current": current,
            },
        )["id"]

    return {"profile": profile["id"], "skills": skills, "projects": projects, "work": work}
