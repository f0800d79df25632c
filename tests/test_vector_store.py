"""Tests for the local and host vector stores."""

import json

import pytest
from aiohttp import web

from core.exceptions import VectorStoreError
from core.models import VectorRecord
from core.types import EmbeddingSource
from providers.vector_store import HostVectorStore, LocalVectorStore

COLLECTION = "vm_Alice_chat-1"


def record(chunk_hash: str, text: str, embedding=None, index: int = 0) -> VectorRecord:
    return VectorRecord(
        hash=chunk_hash, text=text, index=index, collection_id=COLLECTION,
        embedding=embedding, timestamp=1700000000, speaker="Bob",
    )


class TestLocalVectorStore:
    """Test the in-process store and its JSON persistence."""

    async def test_insert_list_delete_purge(self):
        store = LocalVectorStore()
        await store.insert(COLLECTION, [record("a", "one", [1.0, 0.0]), record("b", "two", [0.0, 1.0])])

        assert sorted(await store.list_hashes(COLLECTION)) == ["a", "b"]
        assert await store.delete(COLLECTION, ["a", "missing"]) == 1
        assert await store.list_hashes(COLLECTION) == ["b"]

        await store.purge(COLLECTION)
        assert await store.list_hashes(COLLECTION) == []

    async def test_collections_are_isolated(self):
        store = LocalVectorStore()
        await store.insert(COLLECTION, [record("a", "one", [1.0])])

        assert await store.list_hashes("vm_other_chat") == []

    async def test_insert_same_hash_replaces(self):
        store = LocalVectorStore()
        await store.insert(COLLECTION, [record("a", "one", [1.0])])
        await store.insert(COLLECTION, [record("a", "one again", [1.0])])

        records = await store.list_records(COLLECTION)
        assert [r.text for r in records] == ["one again"]

    async def test_insert_without_vector_rejected(self):
        store = LocalVectorStore()

        with pytest.raises(VectorStoreError):
            await store.insert(COLLECTION, [record("a", "one")], source=EmbeddingSource.STORE)

    async def test_query_threshold_and_order(self):
        store = LocalVectorStore()
        await store.insert(COLLECTION, [
            record("a", "exact", [1.0, 0.0]),
            record("b", "close", [1.0, 0.5]),
            record("c", "far", [0.0, 1.0]),
        ])

        results = await store.query(COLLECTION, "q", top_k=5, threshold=0.5, embeddings={"q": [1.0, 0.0]})

        assert [r.text for r in results] == ["exact", "close"]
        assert results[0].speaker == "Bob"

    async def test_query_requires_vector(self):
        store = LocalVectorStore()

        with pytest.raises(VectorStoreError):
            await store.query(COLLECTION, "q", top_k=5, threshold=0.5, source=EmbeddingSource.STORE)

    async def test_query_dimension_mismatch(self):
        store = LocalVectorStore()
        await store.insert(COLLECTION, [record("a", "x", [1.0, 0.0, 0.0])])

        with pytest.raises(VectorStoreError):
            await store.query(COLLECTION, "q", top_k=5, threshold=0.0, embeddings={"q": [1.0, 0.0]})

    async def test_persistence(self, temp_dir):
        path = temp_dir / "store" / "vectors.json"
        store = LocalVectorStore(path)
        await store.insert(COLLECTION, [record("a", "one", [0.5, 0.5])])

        assert json.loads(path.read_text())["collections"][COLLECTION][0]["hash"] == "a"

        reloaded = LocalVectorStore(path)
        records = await reloaded.list_records(COLLECTION)
        assert records[0].embedding == [0.5, 0.5]
        assert reloaded.get_stats() == {"collections": 1, "records": {COLLECTION: 1}}

    async def test_corrupt_file(self, temp_dir):
        path = temp_dir / "vectors.json"
        path.write_text("{not json")

        with pytest.raises(VectorStoreError):
            await LocalVectorStore(path).list_hashes(COLLECTION)

    async def test_failed_load_never_overwrites_file(self, temp_dir):
        path = temp_dir / "vectors.json"
        original = '{"collections": {"vm_a_b": [{"hash": "k", "text": "keep me"}]'
        path.write_text(original)
        store = LocalVectorStore(path)

        with pytest.raises(VectorStoreError):
            await store.list_hashes(COLLECTION)
        with pytest.raises(VectorStoreError):
            await store.insert("vm_c_d", [record("h", "new", [1.0])])
        with pytest.raises(VectorStoreError):
            await store.purge(COLLECTION)

        assert path.read_text() == original

    async def test_invalid_record_is_not_half_loaded(self, temp_dir):
        path = temp_dir / "vectors.json"
        original = json.dumps({"collections": {
            "vm_a_b": [{"hash": "k", "text": "keep me", "embedding": [1.0]}],
            "vm_c_d": [{"text": "no hash"}],
        }})
        path.write_text(original)
        store = LocalVectorStore(path)

        with pytest.raises(VectorStoreError):
            await store.list_hashes("vm_a_b")
        with pytest.raises(VectorStoreError):
            await store.insert("vm_a_b", [record("h", "new", [1.0])])

        assert path.read_text() == original


def host_vector_app(calls: list, responses: dict, status: int = 200):
    """Application recording /api/vector/<op> calls."""

    async def handler(request):
        operation = request.match_info["operation"]
        body = await request.json()
        calls.append((operation, body))
        if status != 200:
            return web.Response(status=status, text="forbidden")
        if operation in responses:
            return web.json_response(responses[operation])
        return web.Response(text="")

    app = web.Application()
    app.router.add_post("/api/vector/{operation}", handler)
    return app


class TestHostVectorStore:
    """Test the host vector API client."""

    async def make_store(self, http_server, calls, responses=None, status=200):
        server = await http_server(host_vector_app(calls, responses or {}, status))
        return HostVectorStore(str(server.make_url("/")), headers={"X-CSRF-Token": "t"})

    async def test_precomputed_insert(self, http_server):
        calls = []
        store = await self.make_store(http_server, calls)

        inserted = await store.insert(COLLECTION, [record("a", "one", [0.1, 0.2])])

        assert inserted == 1
        operation, body = calls[0]
        assert operation == "insert"
        assert body["collectionId"] == COLLECTION
        assert body["source"] == "precomputed"
        assert body["items"][0]["hash"] == "a"
        assert "embedding" not in body["items"][0]
        assert body["embeddings"] == {"one": [0.1, 0.2]}

    async def test_store_computed_insert(self, http_server):
        calls = []
        store = await self.make_store(http_server, calls)

        await store.insert(COLLECTION, [record("a", "one")], source=EmbeddingSource.STORE)

        assert calls[0][1]["source"] == "store"
        assert "embeddings" not in calls[0][1]

    async def test_precomputed_insert_requires_vectors(self, http_server):
        store = await self.make_store(http_server, [])

        with pytest.raises(VectorStoreError):
            await store.insert(COLLECTION, [record("a", "one")])

    async def test_query(self, http_server):
        calls = []
        store = await self.make_store(http_server, calls, {
            "query": {"results": [{"text": "hit", "score": 0.82, "hash": "a", "speaker": "Bob"}]},
        })

        results = await store.query(COLLECTION, "question", top_k=3, threshold=0.7, embeddings={"question": [1.0]})

        assert results[0].text == "hit"
        assert results[0].score == pytest.approx(0.82)
        body = calls[0][1]
        assert body["searchText"] == "question"
        assert body["topK"] == 3
        assert body["threshold"] == 0.7

    async def test_list_and_delete(self, http_server):
        calls = []
        store = await self.make_store(http_server, calls, {
            "list": {"hashes": ["a", 12]},
        })

        assert await store.list_hashes(COLLECTION) == ["a", "12"]
        assert await store.delete(COLLECTION, ["a"]) == 1
        assert await store.delete(COLLECTION, []) == 0
        assert [op for op, _ in calls] == ["list", "delete"]

    async def test_list_records(self, http_server):
        calls = []
        store = await self.make_store(http_server, calls, {
            "list": {"records": [{"hash": "a", "text": "one", "embedding": [1.0, 0.0]}]},
        })

        records = await store.list_records(COLLECTION)

        assert records[0].embedding == [1.0, 0.0]
        assert calls[0][1]["includeVectors"] is True

    async def test_error_status(self, http_server):
        store = await self.make_store(http_server, [], status=403)

        with pytest.raises(VectorStoreError) as exc_info:
            await store.purge(COLLECTION)
        assert exc_info.value.context["status_code"] == 403

    async def test_unreachable_host(self):
        store = HostVectorStore("http://127.0.0.1:1", timeout=2)

        with pytest.raises(VectorStoreError):
            await store.list_hashes(COLLECTION)
