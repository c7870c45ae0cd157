"""
Mindmap Generator - Pytest Configuration
========================================

Shared fixtures for all tests.
"""

import os

# Set test environment BEFORE any imports
os.environ["ENV_MODE"] = "TEST"
os.environ["GOOGLE_API_KEY"] = ""
os.environ["SENTRY_DSN"] = ""

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from services.mindmap_service import MindMapService


def make_tree(branches: int = 3, leaves: int = 2, root_name: str = "Space Exploration") -> dict:
    """Build a raw tree with `branches` main branches of `leaves` sub-topics each."""
    return {
        "name": root_name,
        "children": [
            {
                "name": f"Branch {b}",
                "children": [{"name": f"Topic {b}.{leaf}"} for leaf in range(1, leaves + 1)],
            }
            for b in range(1, branches + 1)
        ],
    }


@pytest.fixture
def tree_factory():
    return make_tree


@pytest.fixture
def raw_tree() -> dict:
    """1 root, 3 branches, 2 sub-topics each: 10 nodes."""
    return make_tree()


@pytest.fixture
def fake_generator(raw_tree):
    """Stand-in for the Gemini call that records the topics it was asked for."""

    async def generator(topic: str) -> dict:
        generator.calls.append(topic)
        return raw_tree

    generator.calls = []
    return generator


@pytest.fixture
def service(fake_generator) -> MindMapService:
    return MindMapService(generator=fake_generator)


@pytest_asyncio.fixture
async def async_client(service):
    """HTTP client bound to the app with the fake-backed service."""
    from main import app
    from api.mindmap_routes import get_mindmap_service

    app.dependency_overrides[get_mindmap_service] = lambda: service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
