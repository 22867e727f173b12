"""Tests for MermaidSettings (MERMAID_* environment)."""

import pytest
from pydantic import ValidationError

from mermaid_runner.core.settings import MermaidSettings
from mermaid_runner.engine.protocol import MermaidConfig


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    for name in (
        "MERMAID_START_ON_LOAD",
        "MERMAID_DETERMINISTIC_IDS",
        "MERMAID_DETERMINISTIC_ID_SEED",
        "MERMAID_MMDC_PATH",
        "MERMAID_LOG_LEVEL",
        "MERMAID_JSON_LOGS",
    ):
        monkeypatch.delenv(name, raising=False)
    # keep a developer's .env out of the picture
    monkeypatch.chdir(tmp_path)


class TestDefaults:
    def test_defaults(self):
        s = MermaidSettings()
        assert s.start_on_load is True
        assert s.deterministic_ids is False
        assert s.deterministic_id_seed is None
        assert s.mmdc_path == "mmdc"
        assert s.log_level == "INFO"
        assert s.json_logs is None


class TestEnvironment:
    def test_reads_prefixed_env(self, monkeypatch):
        monkeypatch.setenv("MERMAID_DETERMINISTIC_IDS", "true")
        monkeypatch.setenv("MERMAID_DETERMINISTIC_ID_SEED", "doc-")
        monkeypatch.setenv("MERMAID_START_ON_LOAD", "false")
        monkeypatch.setenv("MERMAID_MMDC_PATH", "/opt/bin/mmdc")
        s = MermaidSettings()
        assert s.deterministic_ids is True
        assert s.deterministic_id_seed == "doc-"
        assert s.start_on_load is False
        assert s.mmdc_path == "/opt/bin/mmdc"

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("MERMAID_LOG_LEVEL=debug\n")
        assert MermaidSettings().log_level == "DEBUG"

    def test_init_kwargs_win(self, monkeypatch):
        monkeypatch.setenv("MERMAID_MMDC_PATH", "from-env")
        assert MermaidSettings(mmdc_path="explicit").mmdc_path == "explicit"


class TestValidation:
    def test_log_level_uppercased(self):
        assert MermaidSettings(log_level="warning").log_level == "WARNING"

    def test_bad_log_level(self):
        with pytest.raises(ValidationError):
            MermaidSettings(log_level="LOUD")


class TestToConfig:
    def test_carries_scan_fields(self):
        config = MermaidSettings(
            deterministic_ids=True, deterministic_id_seed="s", start_on_load=False
        ).to_config()
        assert isinstance(config, MermaidConfig)
        assert config.deterministic_ids is True
        assert config.deterministic_id_seed == "s"
        assert config.start_on_load is False
