"""Unit tests for Settings and the YAML config loader."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from semsearch.config.loader import load_config
from tests.conftest import make_settings


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from semsearch.config.settings import Settings

        for var in ("CHUNK_SIZE", "CHUNK_OVERLAP", "SEARCH_TOP_K", "OPENAI_EMBEDDING_MODEL", "CORPUS_EXTENSIONS"):
            monkeypatch.delenv(var, raising=False)
        settings = Settings(_env_file=None)

        assert settings.chunk_size == 1000
        assert settings.chunk_overlap == 200
        assert settings.search_top_k == 4
        assert settings.openai_embedding_model == "text-embedding-3-large"
        assert settings.get_corpus_extensions() == [".pdf"]
        assert settings.auto_index_on_query is True

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from semsearch.config.settings import Settings

        monkeypatch.setenv("CHUNK_SIZE", "500")
        monkeypatch.setenv("CHUNK_OVERLAP", "50")
        settings = Settings(_env_file=None)

        assert settings.chunk_size == 500
        assert settings.chunk_overlap == 50

    def test_overlap_must_be_smaller_than_chunk(self) -> None:
        with pytest.raises(ValidationError):
            make_settings(chunk_size=100, chunk_overlap=100)

    def test_extensions_are_normalised(self) -> None:
        settings = make_settings(corpus_extensions=" PDF, .txt,md,,.PDF ")
        assert settings.get_corpus_extensions() == [".pdf", ".txt", ".md"]

    def test_corpus_urls_parsed(self) -> None:
        settings = make_settings(corpus_urls="https://a.example/x, ,https://b.example/y")
        assert settings.get_corpus_urls() == ["https://a.example/x", "https://b.example/y"]

    def test_available_embedding_providers(self) -> None:
        assert make_settings(openai_api_key="sk-x").get_available_embedding_providers() == [
            "openai",
            "ollama",
        ]
        assert make_settings(ollama_base_url="").get_available_embedding_providers() == []


class TestLoadConfig:
    def test_yaml_values_merged_with_settings(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(
            "app:\n  name: semsearch\n  port: 1\n"
            "api:\n  cors_origins: ['http://localhost:3000']\n"
            "chunking:\n  chunk_size: 10\n",
            encoding="utf-8",
        )
        settings = make_settings(chunk_size=800, chunk_overlap=100, app_port=9000)

        config = load_config(str(path), settings=settings)

        assert config["app"]["name"] == "semsearch"
        assert config["app"]["port"] == 9000
        assert config["api"]["cors_origins"] == ["http://localhost:3000"]
        assert config["chunking"] == {"chunk_size": 800, "overlap": 100}
        assert config["corpus"]["extensions"] == [".txt", ".md", ".html"]

    def test_missing_yaml_uses_settings_only(self, tmp_path: Path) -> None:
        config = load_config(str(tmp_path / "absent.yaml"), settings=make_settings())
        assert config["search"]["top_k"] == 4
        assert "api" not in config

    def test_shipped_yaml_values_are_not_overridden(self) -> None:
        path = Path(__file__).resolve().parents[2] / "config" / "config.yaml"
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))

        config = load_config(str(path), settings=make_settings())

        for section, values in raw.items():
            for key, value in values.items():
                assert config[section][key] == value, f"{section}.{key} is shadowed by Settings"
