"""
Pytest fixtures for the template builder tests.
"""

import pytest
from fastapi.testclient import TestClient

from template_builder.canvas.element_store import ElementStore
from template_builder.canvas.interaction import CanvasInteractionEngine
from template_builder.models.canvas_models import ElementType, Point, TableColumn, TableData
from template_builder.server import app


# =============================================================================
# Model Fixtures
# =============================================================================

@pytest.fixture
def store() -> ElementStore:
    """Empty element store."""
    return ElementStore()


@pytest.fixture
def engine(store: ElementStore) -> CanvasInteractionEngine:
    """Interaction engine over the store fixture."""
    return CanvasInteractionEngine(store)


@pytest.fixture
def table_element(store: ElementStore):
    """Freshly created (empty) table."""
    return store.create(ElementType.TABLE, Point(x=0, y=0))


@pytest.fixture
def two_column_table() -> TableData:
    """Two named columns, two rows."""
    return TableData(
        headers=[
            TableColumn(content="Order", name="Order Id", description="Unique order number"),
            TableColumn(content="Total", name="Order Total", description="Amount in EUR"),
        ],
        body_rows=[["A-1", "10.00"], ["A-2", "12.50"]],
    )


# =============================================================================
# API Fixtures
# =============================================================================

@pytest.fixture
def client():
    """FastAPI TestClient with lifespan-managed services."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def session_id(client: TestClient) -> str:
    """A fresh canvas session."""
    response = client.post("/api/canvas/session")
    assert response.status_code == 200
    return response.json()["session_id"]
