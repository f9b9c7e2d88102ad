from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from core.events import EventKind
from core.mirror import MirrorDispatcher
from services.api import routes
from services.api.main import app, create_app
from tests.utils_events import ACCOUNT, BLOB_ACCOUNT, DictSource, RecordingStore, grid_event


@pytest.fixture()
def wired(store: RecordingStore, source: DictSource):
    app.dependency_overrides[routes.get_dispatcher] = lambda: MirrorDispatcher(store)
    app.dependency_overrides[routes.get_source] = lambda: source
    app.dependency_overrides[routes.get_dispatch_mode] = lambda: "inline"
    yield store, source
    app.dependency_overrides.clear()


async def _post(payload, target=app, **kwargs):
    async with AsyncClient(transport=ASGITransport(app=target), base_url="http://test") as client:
        return await client.post("/v1/events", json=payload, **kwargs)


@pytest.mark.asyncio()
async def test_subscription_validation_handshake(wired):
    response = await _post(
        [grid_event("Microsoft.EventGrid.SubscriptionValidationEvent", {"validationCode": "512d38b6"})]
    )

    assert response.status_code == 200
    assert response.json() == {"validationResponse": "512d38b6"}


@pytest.mark.asyncio()
async def test_validation_without_code_is_rejected(wired):
    response = await _post([grid_event("Microsoft.EventGrid.SubscriptionValidationEvent", {})])
    assert response.status_code == 400
    assert response.json()["error"] == "MalformedPayloadError"


@pytest.mark.asyncio()
async def test_blob_created_is_mirrored_inline(wired):
    store, source = wired
    url = f"{ACCOUNT}/data/a/b.txt"
    source.objects[url] = b"hello"

    response = await _post([grid_event("Microsoft.Storage.BlobCreated", {"api": "FlushWithClose", "url": url})])

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["accepted"] == 1
    assert body["results"][0]["status"] == "applied"
    assert body["results"][0]["path"] == "/data/a/b.txt"
    assert store.files == {"/data/a/b.txt": b"hello"}


@pytest.mark.asyncio()
async def test_single_event_object_is_accepted(wired):
    store, _ = wired
    response = await _post(grid_event("Microsoft.Storage.DirectoryCreated", {"url": f"{ACCOUNT}/data/new"}))

    assert response.status_code == 200
    assert store.calls == [("create_directory", "/data/new")]


@pytest.mark.asyncio()
async def test_batch_with_unknown_type_and_missing_content(wired):
    store, _ = wired
    response = await _post(
        [
            grid_event("Microsoft.Storage.BlobTierChanged", {"url": f"{ACCOUNT}/data/x"}, event_id="1"),
            grid_event("Microsoft.Storage.BlobCreated", {"url": f"{ACCOUNT}/data/vanished"}, event_id="2"),
            grid_event(
                "Microsoft.Storage.BlobRenamed",
                {"sourceBlobUrl": f"{BLOB_ACCOUNT}/data/old", "destinationBlobUrl": f"{BLOB_ACCOUNT}/data/new"},
                event_id="3",
            ),
        ]
    )

    body = response.json()
    assert response.status_code == 200
    assert (body["accepted"], body["skipped"]) == (1, 2)
    assert [r["status"] for r in body["results"]] == ["ignored", "skipped", "applied"]
    assert store.calls == [("rename_file", "/data/old", "/data/new")]


@pytest.mark.asyncio()
async def test_malformed_event_data_fails_the_delivery(wired):
    response = await _post([grid_event("Microsoft.Storage.BlobDeleted", {"api": "DeleteFile"})])

    assert response.status_code == 400
    assert response.json()["details"] == {"field": "url"}


@pytest.mark.asyncio()
async def test_store_failure_surfaces_as_503(wired):
    _, source = wired
    failing = RecordingStore(fail_on={"delete_directory"})
    app.dependency_overrides[routes.get_dispatcher] = lambda: MirrorDispatcher(failing)

    response = await _post([grid_event("Microsoft.Storage.DirectoryDeleted", {"url": f"{ACCOUNT}/data/dir"})])

    assert response.status_code == 503
    assert response.json()["error"] == "TransferFailedError"


@pytest.mark.asyncio()
async def test_envelope_without_id_is_rejected(wired):
    response = await _post([{"eventType": "Microsoft.Storage.BlobCreated", "data": {}}])
    assert response.status_code == 400


@pytest.mark.asyncio()
async def test_queue_mode_enqueues_one_task_per_event(wired, monkeypatch):
    store, _ = wired
    sent = []
    monkeypatch.setattr(routes, "_enqueue", lambda kind, data: sent.append((kind, data)))
    app.dependency_overrides[routes.get_dispatch_mode] = lambda: "queue"
    data = {"url": f"{ACCOUNT}/data/a"}

    response = await _post([grid_event("Microsoft.Storage.BlobDeleted", data)])

    assert response.json()["results"][0]["status"] == "queued"
    assert sent == [(EventKind.FILE_DELETED, data)]
    assert store.calls == []


@pytest.mark.asyncio()
async def test_webhook_key_is_enforced(monkeypatch, store, source):
    monkeypatch.setenv("LAKEMIRROR_WEBHOOK_SECRET", "s3cret")
    keyed = create_app()
    keyed.dependency_overrides[routes.get_dispatcher] = lambda: MirrorDispatcher(store)
    keyed.dependency_overrides[routes.get_source] = lambda: source
    keyed.dependency_overrides[routes.get_dispatch_mode] = lambda: "inline"
    event = [grid_event("Microsoft.Storage.DirectoryCreated", {"url": f"{ACCOUNT}/data/d"})]

    denied = await _post(event, target=keyed)
    by_query = await _post(event, target=keyed, params={"code": "s3cret"})
    by_header = await _post(event, target=keyed, headers={"x-lakemirror-key": "s3cret"})

    assert denied.status_code == 401
    assert by_query.status_code == 200
    assert by_header.status_code == 200
    assert store.calls == [("create_directory", "/data/d")] * 2
