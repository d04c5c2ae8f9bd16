import pytest
from pydantic import ValidationError as PydanticValidationError

from relay_core.config.settings import Settings


ENV_KEYS = [
    "OPENAI_API_KEY",
    "OPENAI_ORGANIZATION",
    "OPENAI_API_HOST",
    "PINECONE_API_KEY",
    "PINECONE_INDEX",
    "PINECONE_ENVIRONMENT",
    "HTTP_TIMEOUT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("RELAY_CONFIG_FILE", str(tmp_path / "missing.yaml"))
    monkeypatch.chdir(tmp_path)


def test_defaults():
    s = Settings(_env_file=None)
    assert s.openai_api_host == "https://api.openai.com"
    assert s.default_model == "gpt-3.5-turbo"
    assert s.pinecone_project_id == "2c91f9c"
    assert s.http_timeout is None
    assert s.openai_api_key is None


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-from-environment")
    monkeypatch.setenv("OPENAI_ORGANIZATION", "org-1")
    monkeypatch.setenv("OPENAI_API_HOST", "https://proxy.example.com/")
    s = Settings(_env_file=None)
    assert s.openai_api_key == "sk-from-environment"
    assert s.openai_organization == "org-1"
    assert s.openai_api_host == "https://proxy.example.com"


def test_short_key_rejected():
    with pytest.raises(PydanticValidationError):
        Settings(_env_file=None, openai_api_key="short")


def test_yaml_config(monkeypatch, tmp_path):
    cfg = tmp_path / "relay.yaml"
    cfg.write_text("pinecone_index: docs\npinecone_environment: us-west1-gcp\nhttp_timeout: 12\n", encoding="utf-8")
    monkeypatch.setenv("RELAY_CONFIG_FILE", str(cfg))
    s = Settings(_env_file=None)
    assert s.pinecone_index == "docs"
    assert s.pinecone_environment == "us-west1-gcp"
    assert s.http_timeout == 12.0


def test_env_beats_yaml(monkeypatch, tmp_path):
    cfg = tmp_path / "relay.yaml"
    cfg.write_text("pinecone_index: from-yaml\n", encoding="utf-8")
    monkeypatch.setenv("RELAY_CONFIG_FILE", str(cfg))
    monkeypatch.setenv("PINECONE_INDEX", "from-env")
    assert Settings(_env_file=None).pinecone_index == "from-env"
