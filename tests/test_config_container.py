"""Tests for configuration, the DI container, prompts and the CLI."""

from unittest.mock import patch

import pytest

from trip_stream.__main__ import main
from trip_stream.adapters.llm.gemini_adapter import GeminiModelProvider
from trip_stream.adapters.llm.static_provider import StaticModelProvider
from trip_stream.adapters.storage.memory_repository import InMemoryItineraryRepository
from trip_stream.adapters.storage.mongo_repository import MongoItineraryRepository
from trip_stream.config import AppConfig, LLMConfig, StorageConfig, get_config, reset_config
from trip_stream.container import Container, get_container, reset_container
from trip_stream.domain.models import SENTINEL
from trip_stream.ports.model_provider import ModelProviderPort
from trip_stream.ports.repository import ItineraryRepositoryPort
from trip_stream.prompts import build_system_instruction, location_types
from trip_stream.services.trip_planner import TripPlannerService


@pytest.fixture(autouse=True)
def fresh_config():
    reset_config()
    reset_container()
    yield
    reset_config()
    reset_container()


def test_defaults():
    config = get_config()

    assert config.stream.sentinel == SENTINEL
    assert config.llm.provider == "gemini"
    assert config.storage.backend == "memory"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("TRIP_LLM_PROVIDER", "static")
    monkeypatch.setenv("TRIP_STORAGE_BACKEND", "mongo")
    monkeypatch.setenv("TRIP_LOG_LEVEL", "DEBUG")
    reset_config()

    config = get_config()

    assert config.llm.provider == "static"
    assert config.storage.backend == "mongo"
    assert config.observability.level == "DEBUG"


def test_config_is_cached():
    assert get_config() is get_config()


def test_container_register_and_resolve():
    container = Container(config=AppConfig())
    container.register(ModelProviderPort, lambda: StaticModelProvider())

    assert container.resolve(ModelProviderPort) is container.resolve(ModelProviderPort)

    container.register(ModelProviderPort, lambda: StaticModelProvider(), singleton=False)
    assert container.resolve(ModelProviderPort) is not container.resolve(ModelProviderPort)

    with pytest.raises(KeyError):
        container.resolve(ItineraryRepositoryPort)


def test_default_container_wiring():
    config = AppConfig(llm=LLMConfig(provider="static"), storage=StorageConfig(backend="memory"))
    planner = Container.create_default(config).resolve(TripPlannerService)

    assert isinstance(planner.model_provider, StaticModelProvider)
    assert isinstance(planner.repository, InMemoryItineraryRepository)
    assert planner.sentinel == SENTINEL


def test_default_container_production_adapters():
    config = AppConfig(llm=LLMConfig(provider="gemini"), storage=StorageConfig(backend="mongo"))
    container = Container.create_default(config)

    assert isinstance(container.resolve(ModelProviderPort), GeminiModelProvider)
    assert isinstance(container.resolve(ItineraryRepositoryPort), MongoItineraryRepository)


def test_get_container_is_singleton():
    assert get_container() is get_container()


def test_system_instruction_mentions_contract():
    instruction = build_system_instruction(language="English")

    assert SENTINEL in instruction
    assert "Respond in English" in instruction
    assert '"locations"' in instruction
    for label in location_types():
        assert f'"{label}"' in instruction
    assert "generic" not in location_types()


def test_cli_offline_run(capsys, tmp_path):
    map_path = tmp_path / "trip.html"

    exit_code = main(["--offline", "--save", "--map", str(map_path), "Chiang", "Mai"])

    captured = capsys.readouterr()
    assert exit_code == 0
    assert "## Day 1" in captured.out
    assert SENTINEL not in captured.out
    assert "Old City and Mountain Temples" in captured.out
    assert map_path.exists()
    # The in-memory store would lose the trip on exit.
    assert "Saved trip" not in captured.out
    assert "TRIP_STORAGE_BACKEND=mongo" in captured.err


def test_cli_saves_to_mongo_backend(capsys, monkeypatch):
    monkeypatch.setenv("TRIP_STORAGE_BACKEND", "mongo")

    with patch.object(MongoItineraryRepository, "save", return_value="abc123") as save:
        exit_code = main(["--offline", "--save", "Chiang", "Mai"])

    assert exit_code == 0
    save.assert_called_once()
    assert save.call_args.args[0].payload.title == "Old City and Mountain Temples"
    assert "Saved trip abc123" in capsys.readouterr().out


def test_cli_uses_default_container(capsys, monkeypatch):
    monkeypatch.setenv("TRIP_LLM_PROVIDER", "static")

    exit_code = main(["Chiang", "Mai"])

    assert exit_code == 0
    provider = get_container().resolve(ModelProviderPort)
    assert [prompt for _, prompt in provider.calls] == ["Chiang Mai"]
    assert "Old City and Mountain Temples" in capsys.readouterr().out
