"""Tests for the command line interface and the JSONL chat host."""

import json

import pytest
from aiohttp import web

from core.exceptions import ConfigurationError
from core.types import RoleType
from providers.host import JsonlChatHost
from vectormanager.api.cli.main import async_main, create_parser
from vectormanager.api.cli.utils.config_helpers import args_to_config
from vectormanager.api.cli.utils.output import OutputFormatter, format_ingestion_stats
from vectormanager.core.config import settings_sources

KEYWORDS = ("lighthouse", "storm", "keeper", "bread")


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, temp_dir):
    monkeypatch.setattr(settings_sources, "USER_CONFIG_PATH", temp_dir / "user" / "config.json")
    monkeypatch.chdir(temp_dir)


@pytest.fixture
def chat_file(temp_dir):
    rows = [
        {"user_name": "Sam", "character_name": "Alice", "chat_metadata": {}},
        {"name": "Sam", "is_user": True, "is_system": False, "send_date": 1700000000,
         "mes": "Tell me about the <i>lighthouse</i> keeper."},
        {"name": "Alice", "is_user": False, "is_system": False, "send_date": 1700000060,
         "mes": "The keeper climbed the lighthouse every storm."},
        {"name": "Alice", "is_user": False, "is_system": False, "send_date": 1700000120,
         "mes": "Later she baked bread."},
    ]
    path = temp_dir / "chat.jsonl"
    path.write_text("\n".join(json.dumps(row) for row in rows) + "\n")
    return path


def keyword_embeddings_app():
    async def handler(request):
        body = await request.json()
        data = []
        for i, text in enumerate(body["input"]):
            lowered = text.lower()
            data.append({"index": i, "embedding": [float(lowered.count(k)) for k in KEYWORDS] + [0.01]})
        return web.json_response({"data": data})

    app = web.Application()
    app.router.add_post("/v1/embeddings", handler)
    return app


class TestParser:
    """Test argument parsing and config mapping."""

    def test_vectorize_arguments(self):
        args = create_parser().parse_args([
            "vectorize", "--chat", "chat.jsonl", "--layers", "2-5",
            "--endpoint", "custom", "--custom-url", "http://localhost:9/embed",
            "--store-path", "vectors.json", "--batch-size", "8",
        ])

        assert args.command == "vectorize"
        assert args.layers == "2-5"
        assert args.batch_size == 8
        assert str(args.store_path) == "vectors.json"

    def test_store_options_are_exclusive(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args([
                "list", "--chat", "c.jsonl", "--store-path", "v.json", "--host-url", "http://h",
            ])

    def test_chat_is_required(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["preview"])

    def test_args_to_config(self):
        args = create_parser().parse_args([
            "query", "--chat", "c.jsonl", "--host-url", "http://127.0.0.1:8000",
            "--threshold", "0.4", "--max-results", "3", "--no-embeddings",
        ])

        config = args_to_config(args)

        assert config.vector_store.kind == "host"
        assert config.retrieval.score_threshold == 0.4
        assert config.retrieval.max_results == 3
        assert config.embedding.enabled is False

    def test_layers_flow_into_config(self):
        args = create_parser().parse_args(["preview", "--chat", "c.jsonl", "--layers", "7-3"])

        config = args_to_config(args)

        assert config.vectorization.layer_range == "3-7"

    async def test_no_command_exits(self):
        with pytest.raises(SystemExit) as exc_info:
            await async_main([])
        assert exc_info.value.code == 1


class TestJsonlChatHost:
    """Test the JSONL chat-file host adapter."""

    def test_load_header_and_messages(self, chat_file):
        host = JsonlChatHost(chat_file)

        transcript = host.get_transcript()
        assert len(transcript) == 3
        assert transcript[0].is_user
        assert host.user_names == ["Sam"]
        assert host.get_conversation_identity() == ("Alice", "chat")

    def test_missing_file(self, temp_dir):
        with pytest.raises(ConfigurationError):
            JsonlChatHost(temp_dir / "missing.jsonl")

    def test_invalid_jsonl(self, temp_dir):
        path = temp_dir / "bad.jsonl"
        path.write_text('{"mes": "ok"}\nnot json\n')

        with pytest.raises(ConfigurationError):
            JsonlChatHost(path)

    def test_notifications_and_injections(self, chat_file):
        received = []
        host = JsonlChatHost(chat_file, notify=lambda message, level: received.append(level))

        host.notify("done", "success")
        host.register_prompt_injection("vector-manager", "ctx", 1, RoleType.SYSTEM)
        assert host.injections["vector-manager"] == ("ctx", 1, RoleType.SYSTEM)
        host.register_prompt_injection("vector-manager", "", 0, RoleType.SYSTEM)

        assert received == ["success"]
        assert host.notifications == [("done", "success")]
        assert host.injections == {}

    def test_persist_settings(self, chat_file, temp_dir):
        target = temp_dir / "settings" / "vm.json"
        host = JsonlChatHost(chat_file, settings_path=target)

        host.persist_settings({"retrieval": {"max_results": 2}})

        assert json.loads(target.read_text()) == {"retrieval": {"max_results": 2}}


class TestCommands:
    """Run commands end to end against a local embedding endpoint."""

    async def test_preview(self, chat_file, capsys):
        await async_main(["preview", "--chat", str(chat_file), "--layers", "1-2"])

        out = capsys.readouterr().out
        assert "Preview (2 messages):" in out
        assert "1. [Sam] Tell me about the lighthouse keeper." in out

    async def test_missing_chat_file(self, temp_dir):
        with pytest.raises(SystemExit) as exc_info:
            await async_main(["preview", "--chat", str(temp_dir / "nope.jsonl")])
        assert exc_info.value.code == 1

    async def test_vectorize_requires_embedding_config(self, chat_file, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        monkeypatch.delenv("VECTOR_MANAGER_EMBEDDING_API_KEY", raising=False)

        with pytest.raises(SystemExit):
            await async_main(["vectorize", "--chat", str(chat_file)])

    async def test_vectorize_query_list_purge(self, chat_file, temp_dir, http_server, capsys):
        server = await http_server(keyword_embeddings_app())
        endpoint = ["--endpoint", "custom", "--custom-url", str(server.make_url("/v1/embeddings"))]
        store = ["--store-path", str(temp_dir / "vectors.json")]

        await async_main(["vectorize", "--chat", str(chat_file), *endpoint, *store])
        out = capsys.readouterr().out
        assert "3 inserted, 0 already stored, 0 duplicates (3 chunks)" in out

        await async_main([
            "query", "--chat", str(chat_file), "--text", "lighthouse storm",
            "--threshold", "0.5", *endpoint, *store,
        ])
        out = capsys.readouterr().out
        assert "Relevant context:" in out
        assert "The keeper climbed the lighthouse every storm." in out
        assert "baked bread" not in out

        await async_main(["list", "--chat", str(chat_file), *store])
        out = capsys.readouterr().out
        assert "3 records in vm_Alice_chat" in out

        await async_main(["purge", "--chat", str(chat_file), "--yes", *store])
        await async_main(["list", "--chat", str(chat_file), "--json", *store])
        out = capsys.readouterr().out
        assert "Purged collection vm_Alice_chat" in out
        result = json.loads(out[out.index("{"):])
        assert result["status"] == "empty"
        assert result["payload"]["hashes"] == []


class TestOutput:
    def test_format_ingestion_stats(self):
        text = format_ingestion_stats({"inserted": 2, "skipped_existing": 1, "skipped_duplicate": 0, "total": 3})
        assert text == "2 inserted, 1 already stored, 0 duplicates (3 chunks)"

    def test_notify_routes_levels(self, capsys):
        formatter = OutputFormatter()

        formatter.notify("stored", "success")
        formatter.notify("broken", "error")

        captured = capsys.readouterr()
        assert "stored" in captured.out
        assert "broken" in captured.err
