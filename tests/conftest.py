"""Shared fixtures for the Shopfloor test suite."""

from __future__ import annotations

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from core.collision.catalog import EquipmentCatalog, EquipmentRecord
from core.settings import Settings
from services.api.layouts_store import FileLayoutStore
from services.api.main import create_app


@pytest.fixture
def catalog() -> EquipmentCatalog:
    return EquipmentCatalog(
        [
            EquipmentRecord(id=1, name="Table Saw", width_ft=4.0, depth_ft=4.0),
            EquipmentRecord(id=2, name="Jointer", width_ft=4.0, depth_ft=4.0),
            EquipmentRecord(id=3, name="Bandsaw", width_ft=2.0, depth_ft=2.0),
        ]
    )


@pytest.fixture
def layout_store(tmp_path) -> FileLayoutStore:
    return FileLayoutStore(tmp_path / "layouts")


@pytest.fixture
def api_app(catalog, layout_store):
    return create_app(settings=Settings(), layout_store=layout_store, catalog=catalog, rate_limit=False)


@pytest_asyncio.fixture
async def client(api_app):
    async with AsyncClient(transport=ASGITransport(app=api_app), base_url="http://test") as http:
        yield http
