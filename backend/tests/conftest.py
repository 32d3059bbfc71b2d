"""
Pytest configuration and shared fixtures.

Fixtures defined here are available to all tests.
"""

import os
import sys
import pytest
from datetime import date, timedelta
from pathlib import Path
from unittest.mock import MagicMock, AsyncMock

# Add backend to path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Set test environment
os.environ["TESTING"] = "true"


# =============================================================================
# App Fixtures
# =============================================================================


@pytest.fixture
def app():
    """FastAPI test application with no dependency overrides."""
    from wastewise.main import app
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """Sync test client for API tests."""
    from fastapi.testclient import TestClient
    return TestClient(app)


@pytest.fixture
async def async_client(app):
    """Async test client for API tests."""
    from httpx import AsyncClient, ASGITransport
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client


# =============================================================================
# Database Fixtures
# =============================================================================


def make_query(data=None):
    """A chainable Supabase query mock whose execute() returns `data`.

    Every builder method (select, eq, order, ...) returns the same mock, so
    any chain ends in the same result.
    """
    query = MagicMock()
    for method in (
        "select", "insert", "update", "upsert", "delete", "eq", "neq", "gte", "lte",
        "in_", "or_", "contains", "order", "limit", "range", "is_",
    ):
        getattr(query, method).return_value = query
    query.not_ = query
    query.execute.return_value = MagicMock(data=data if data is not None else [])
    return query


@pytest.fixture
def mock_supabase():
    """Mock Supabase client. Set per-table results with `mock_supabase.tables[name]`."""
    mock = MagicMock()
    mock.tables = {}

    def table(name):
        if name not in mock.tables:
            mock.tables[name] = make_query()
        return mock.tables[name]

    mock.table.side_effect = table
    return mock


@pytest.fixture
def supabase_query():
    """Factory for chainable query mocks: `supabase_query(rows)`."""
    return make_query


@pytest.fixture
def test_user_id():
    """Test user ID for database operations."""
    return "test-user-00000000-0000-0000-0000-000000000000"


@pytest.fixture
def current_user(test_user_id):
    from wastewise.api.deps import CurrentUser
    return CurrentUser(id=test_user_id, email="test@example.com", metadata={"full_name": "Test User"})


@pytest.fixture
def authed_app(app, mock_supabase, current_user):
    """App with a signed-in user, the mock database and no AI service."""
    from wastewise.api import deps

    app.dependency_overrides[deps.get_optional_user] = lambda: current_user
    app.dependency_overrides[deps.get_db] = lambda: mock_supabase
    app.dependency_overrides[deps.get_ai] = lambda: None
    return app


@pytest.fixture
def authed_client(authed_app):
    from fastapi.testclient import TestClient
    return TestClient(authed_app)


@pytest.fixture
def anon_client(app, mock_supabase):
    """Client with the mock database and no AI service, but no signed-in user."""
    from fastapi.testclient import TestClient
    from wastewise.api import deps

    app.dependency_overrides[deps.get_db] = lambda: mock_supabase
    app.dependency_overrides[deps.get_ai] = lambda: None
    return TestClient(app)


# =============================================================================
# AI Fixtures
# =============================================================================


def make_completion(content: str) -> MagicMock:
    """Shape of an OpenAI chat completion carrying `content`."""
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    return response


@pytest.fixture
def completion():
    """Factory for OpenAI completions: `completion(text)`."""
    return make_completion


@pytest.fixture
def mock_openai():
    """Mock AsyncOpenAI client; set `chat.completions.create.return_value`."""
    client = MagicMock()
    client.chat.completions.create = AsyncMock()
    return client


@pytest.fixture
def mock_ai_service():
    """Mock AIService with every generation method async."""
    return AsyncMock()


# =============================================================================
# Sample Data Fixtures
# =============================================================================


@pytest.fixture
def today():
    return date(2024, 6, 15)


@pytest.fixture
def sample_food_item(test_user_id):
    """Sample food_items row."""
    return {
        "id": "food-item-uuid",
        "user_id": test_user_id,
        "name": "Organic Bananas",
        "category": "Fruits",
        "purchase_date": "2024-06-10",
        "expiration_date": (date.today() + timedelta(days=10)).isoformat(),
        "storage_location": "Pantry",
        "quantity": 6,
        "unit": "pieces",
        "status": "fresh",
    }


@pytest.fixture
def sample_food_items(today):
    """Ten items across three categories."""
    rows = []
    layout = [("Fruits", 5), ("Dairy", 3), ("Vegetables", 2)]
    n = 0
    for category, count in layout:
        for _ in range(count):
            rows.append({
                "id": f"item-{n}",
                "name": f"{category} item {n}",
                "category": category,
                "quantity": 1,
                "status": "fresh",
            })
            n += 1
    rows[0]["status"] = "expired"
    rows[5]["status"] = "expiring_soon"
    rows[6]["status"] = "expiring_soon"
    return rows


@pytest.fixture
def sample_waste_logs(today):
    """Waste logs within the last week."""
    return [
        {"action": "consumed", "date": today.isoformat(), "quantity": 2, "estimated_value": 3.50},
        {"action": "donated", "date": (today - timedelta(days=1)).isoformat(), "quantity": None, "estimated_value": 5.25},
        {"action": "wasted", "date": (today - timedelta(days=1)).isoformat(), "quantity": 1, "estimated_value": 2.00},
        {"action": "preserved", "date": (today - timedelta(days=3)).isoformat(), "quantity": 1, "estimated_value": None},
        {"action": "composted", "date": (today - timedelta(days=20)).isoformat(), "quantity": 1, "estimated_value": 0},
    ]


@pytest.fixture
def sample_recipe_payload():
    """AI recipe answer wrapped in a recipes key."""
    return {
        "recipes": [
            {
                "title": "Chicken Fried Rice",
                "description": "Uses up leftover rice",
                "ingredients": [{"name": "chicken", "quantity": 1, "unit": "lb"}],
                "instructions": ["Cook chicken", "Add rice"],
                "difficulty": "easy",
            },
            {"title": "Broccoli Soup"},
        ]
    }
