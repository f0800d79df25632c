"""Tests for the unified configuration system."""

import json
from pathlib import Path

import pytest
import yaml

from core.exceptions import ConfigurationError
from core.types import EndpointKind, RoleType, SearchStrategy
from vectormanager.core.config import VectorManagerConfig
from vectormanager.core.config import settings_sources
from vectormanager.core.config.clamping import clamp_number
from vectormanager.core.config.settings_sources import deep_merge, load_config_file


@pytest.fixture(autouse=True)
def isolated_user_config(monkeypatch, temp_dir):
    """Point user config discovery at an empty location and clear env overrides."""
    monkeypatch.setattr(settings_sources, "USER_CONFIG_PATH", temp_dir / "user" / "config.json")
    for key in ("VECTOR_MANAGER_EMBEDDING_API_KEY", "VECTOR_MANAGER_EMBEDDING__API_KEY", "OPENAI_API_KEY"):
        monkeypatch.delenv(key, raising=False)


class TestDefaults:
    def test_default_values(self):
        config = VectorManagerConfig()

        assert config.embedding.endpoint == "openai"
        assert config.retrieval.score_threshold == 0.7
        assert config.retrieval.search_strategy is SearchStrategy.DELEGATED
        assert config.rerank.enabled is False
        assert config.injection.role_type is RoleType.SYSTEM
        assert config.vectorization.layer_range == "1-10"
        assert config.vector_store.kind == "local"

    def test_missing_config(self):
        config = VectorManagerConfig()

        assert config.get_missing_config() == ["embedding.api_key"]
        assert not config.is_fully_configured()

    def test_disabled_embedding_needs_nothing(self):
        config = VectorManagerConfig(embedding={"enabled": False})
        assert config.is_fully_configured()

    def test_custom_endpoint_needs_url(self):
        config = VectorManagerConfig(embedding={"endpoint": "custom"})

        assert config.get_missing_config() == ["embedding.custom_url"]
        assert config.embedding.endpoint_kind is EndpointKind.CUSTOM


class TestClamping:
    """Out-of-range settings are clamped, not rejected."""

    def test_clamp_number(self):
        assert clamp_number("x", 5, low=0, high=3) == 3.0
        assert clamp_number("x", "-1", low=0, cast=int) == 0
        assert clamp_number("x", "abc", low=0) == "abc"

    def test_section_values_clamped(self):
        config = VectorManagerConfig(
            retrieval={"score_threshold": 1.7, "max_results": 0},
            rerank={"hybrid_weight": -0.5, "top_n": 0},
            injection={"depth": -2},
            embedding={"batch_size": 0, "max_retries": 50},
        )

        assert config.retrieval.score_threshold == 1.0
        assert config.retrieval.max_results == 1
        assert config.rerank.hybrid_weight == 0.0
        assert config.rerank.top_n == 1
        assert config.injection.depth == 0
        assert config.embedding.batch_size == 1
        assert config.embedding.max_retries == 10

    def test_unknown_endpoint_falls_back(self):
        assert VectorManagerConfig(embedding={"endpoint": "Bogus"}).embedding.endpoint == "openai"
        assert VectorManagerConfig(embedding={"endpoint": " AZURE "}).embedding.endpoint == "azure"

    def test_role_aliases(self):
        assert VectorManagerConfig(injection={"role_type": "character"}).injection.role == "assistant"
        assert VectorManagerConfig(injection={"role": "nonsense"}).injection.role == "system"

    @pytest.mark.parametrize("value,expected", [
        ("3-7", (3, 7)),
        ("9-2", (2, 9)),
        ("0-4", (1, 4)),
        ("garbage", (1, 10)),
    ])
    def test_layer_range(self, value, expected):
        vectorization = VectorManagerConfig(vectorization={"layer_range": value}).vectorization
        assert (vectorization.layer_start, vectorization.layer_end) == expected

    def test_invalid_base_url(self):
        with pytest.raises(ValueError):
            VectorManagerConfig(vector_store={"kind": "host", "base_url": "localhost:8000"})


class TestConfigFiles:
    """Test file loading and precedence."""

    def test_load_json_and_yaml(self, temp_dir):
        json_file = temp_dir / "config.json"
        json_file.write_text(json.dumps({"retrieval": {"max_results": 3}}))
        yaml_file = temp_dir / "config.yaml"
        yaml_file.write_text(yaml.safe_dump({"rerank": {"enabled": True}}))

        assert load_config_file(json_file) == {"retrieval": {"max_results": 3}}
        assert load_config_file(yaml_file) == {"rerank": {"enabled": True}}

    def test_load_invalid_file(self, temp_dir):
        bad = temp_dir / "bad.json"
        bad.write_text("{oops")

        with pytest.raises(ConfigurationError):
            load_config_file(bad)

        listed = temp_dir / "list.yaml"
        listed.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError):
            load_config_file(listed)

    def test_deep_merge(self):
        merged = deep_merge({"a": {"x": 1, "y": 2}, "b": 1}, {"a": {"y": 3}, "c": 4})
        assert merged == {"a": {"x": 1, "y": 3}, "b": 1, "c": 4}

    def test_hierarchical_precedence(self, temp_dir):
        project = temp_dir / "project"
        project.mkdir()
        (project / ".vector-manager.json").write_text(json.dumps({
            "retrieval": {"max_results": 4, "score_threshold": 0.6},
            "injection": {"depth": 3},
        }))
        explicit = temp_dir / "explicit.yaml"
        explicit.write_text(yaml.safe_dump({"retrieval": {"max_results": 7}}))

        config = VectorManagerConfig.load_hierarchical(
            project_dir=project,
            config_file=explicit,
            injection={"depth": 5},
        )

        assert config.retrieval.max_results == 7
        assert config.retrieval.score_threshold == 0.6
        assert config.injection.depth == 5

    def test_environment_variables(self, monkeypatch, temp_dir):
        monkeypatch.setenv("VECTOR_MANAGER_EMBEDDING_API_KEY", "sk-env")
        monkeypatch.setenv("VECTOR_MANAGER_RETRIEVAL__MAX_RESULTS", "6")

        config = VectorManagerConfig.load_hierarchical(project_dir=temp_dir)

        assert config.embedding.get_api_key() == "sk-env"
        assert config.retrieval.max_results == 6

    def test_missing_explicit_file(self, temp_dir):
        with pytest.raises(ConfigurationError):
            VectorManagerConfig.load_hierarchical(project_dir=temp_dir, config_file=temp_dir / "nope.json")

    def test_save_without_secrets(self, temp_dir):
        config = VectorManagerConfig(
            embedding={"api_key": "sk-secret"},
            rerank={"api_key": "co-secret", "enabled": True},
        )
        target = temp_dir / "saved" / "config.json"

        config.save_to_file(target)
        saved = target.read_text()

        assert "sk-secret" not in saved
        assert "co-secret" not in saved
        assert json.loads(saved)["rerank"]["enabled"] is True
        assert config.to_dict(include_secrets=True)["embedding"]["api_key"] == "sk-secret"

    def test_repr_hides_key(self):
        config = VectorManagerConfig(embedding={"api_key": "sk-secret"})
        assert "sk-secret" not in repr(config)

    def test_saved_file_round_trips(self, temp_dir):
        config = VectorManagerConfig(retrieval={"max_results": 2}, vectorization={"layer_range": "2-4"})
        target = temp_dir / "config.json"
        config.save_to_file(target)

        loaded = VectorManagerConfig.load_hierarchical(project_dir=temp_dir, config_file=Path(target))

        assert loaded.retrieval.max_results == 2
        assert loaded.vectorization.layer_range == "2-4"
