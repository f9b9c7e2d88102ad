import pytest

pytest.importorskip("loguru")

from httpx import ASGITransport, AsyncClient

from services.api.main import app


@pytest.mark.asyncio()
async def test_health_endpoint() -> None:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert response.headers["X-Content-Type-Options"] == "nosniff"
