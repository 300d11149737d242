"""Tests for settings loading (defaults, YAML, environment)."""

from __future__ import annotations

from pathlib import Path

import pytest

from release_drafter.config import DrafterSettings, load_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch) -> None:
    for var in ("GITHUB_TOKEN", "GITHUB_API_URL", "RELEASE_DRAFTER_CONFIG"):
        monkeypatch.delenv(var, raising=False)


class TestLoadSettings:
    def test_defaults_without_file(self) -> None:
        settings = load_settings()
        assert settings == DrafterSettings()
        assert settings.heading == "## Changes"
        assert settings.first_release_text == "Initial release!"
        assert settings.line_separator == "    \n"
        assert settings.compare_head == "HEAD"

    def test_missing_file_returns_defaults(self, tmp_path: Path) -> None:
        assert load_settings(tmp_path / "nope.yaml") == DrafterSettings()

    def test_yaml_overrides(self, tmp_path: Path) -> None:
        path = tmp_path / "drafter.yaml"
        path.write_text(
            "heading: '## 변경 사항'\n"
            "first_release_text: '처음 릴리즈!'\n"
            "ignored_issue_authors: [potados]\n"
        )
        settings = load_settings(path)
        assert settings.heading == "## 변경 사항"
        assert settings.first_release_text == "처음 릴리즈!"
        assert settings.ignored_issue_authors == ["potados"]

    def test_config_path_from_env(self, tmp_path: Path, monkeypatch) -> None:
        path = tmp_path / "drafter.yaml"
        path.write_text("compare_head: main\n")
        monkeypatch.setenv("RELEASE_DRAFTER_CONFIG", str(path))
        assert load_settings().compare_head == "main"

    def test_env_overrides_yaml(self, tmp_path: Path, monkeypatch) -> None:
        path = tmp_path / "drafter.yaml"
        path.write_text("github_token: from-file\n")
        monkeypatch.setenv("GITHUB_TOKEN", "from-env")
        monkeypatch.setenv("GITHUB_API_URL", "https://ghe.example.com/api/v3")
        settings = load_settings(path)
        assert settings.github_token == "from-env"
        assert settings.api_base_url == "https://ghe.example.com/api/v3"

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "drafter.yaml"
        path.write_text("heading: [unclosed\n")
        with pytest.raises(ValueError, match="Invalid YAML"):
            load_settings(path)

    def test_invalid_values(self, tmp_path: Path) -> None:
        path = tmp_path / "drafter.yaml"
        path.write_text("timeout: -1\n")
        with pytest.raises(ValueError, match="Invalid drafter config"):
            load_settings(path)

    def test_non_mapping_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "drafter.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError, match="expected a mapping"):
            load_settings(path)
