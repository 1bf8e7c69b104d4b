"""Unit tests for application settings configuration."""

from pathlib import Path

from app.config import Settings


def test_settings_uses_backend_env_file_independent_of_cwd():
    """Settings should always include backend/.env as an env source."""
    env_files = Settings.model_config.get("env_file")
    assert env_files is not None

    normalized = {str(Path(item)) for item in env_files}
    expected_backend_env = str(Path(__file__).resolve().parents[2] / ".env")

    assert expected_backend_env in normalized
    assert str(Path(".env")) in normalized


def test_retrieval_defaults():
    settings = Settings(_env_file=None)
    assert settings.retrieval_min_similarity == 0.1
    assert settings.retrieval_limit == 10
    assert settings.embedding_dimensions == 1024
    assert settings.embedding_model == "embed-english-v3.0"


def test_unknown_vector_store_backend_falls_back_to_postgres():
    assert Settings(_env_file=None, vector_store_backend="Memory").vector_store_backend == "memory"
    assert Settings(_env_file=None, vector_store_backend="redis").vector_store_backend == "postgres"
