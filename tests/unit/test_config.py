"""Tests for build settings: env-driven."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from buildforge.config import BuildSettings


class TestBuildSettings:
    def test_defaults(self):
        settings = BuildSettings(_env_file=None)
        assert settings.build_version == "git"
        assert settings.build_number == 0
        assert settings.configuration == "Release"
        assert settings.sign_key is None
        assert settings.parallelize_tests is False
        assert settings.max_parallel_threads == 0
        assert settings.log_level == "INFO"

    def test_default_paths(self):
        settings = BuildSettings(_env_file=None)
        assert settings.solution == Path("Src/All.sln")
        assert settings.release_folder == Path("Release")
        assert settings.nuget_output_folder == Path("NuGetPackages")

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("BUILDFORGE_BUILD_VERSION", "3.50.2")
        monkeypatch.setenv("BUILDFORGE_BUILD_NUMBER", "288")
        monkeypatch.setenv("BUILDFORGE_PARALLELIZE_TESTS", "true")
        settings = BuildSettings(_env_file=None)
        assert settings.build_version == "3.50.2"
        assert settings.build_number == 288
        assert settings.parallelize_tests is True

    def test_dotenv_file(self, tmp_path):
        env_file = tmp_path / "build.env"
        env_file.write_text("BUILDFORGE_CONFIGURATION=Debug\n", encoding="utf-8")
        assert BuildSettings(_env_file=env_file).configuration == "Debug"

    def test_negative_build_number_rejected(self):
        with pytest.raises(ValidationError):
            BuildSettings(_env_file=None, build_number=-1)

    def test_negative_thread_cap_rejected(self):
        with pytest.raises(ValidationError):
            BuildSettings(_env_file=None, max_parallel_threads=-2)

    def test_overrides(self):
        settings = BuildSettings(
            _env_file=None,
            build_version="1.0.0",
            build_info_version="1.0.0-info",
        )
        overrides = settings.overrides()
        assert overrides.info_version == "1.0.0-info"
        assert overrides.file_version is None
        assert overrides.nuget_version is None

    def test_secrets_lists_configured_keys_only(self):
        assert BuildSettings(_env_file=None).secrets() == []
        settings = BuildSettings(_env_file=None, nuget_private_key="priv")
        assert settings.secrets() == ["priv"]
