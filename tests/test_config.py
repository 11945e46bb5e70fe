"""Unit tests for Config and related Pydantic models (vclight_create.config).

Tests cover:
- RegistryConfig defaults and validation
- TemplateConfig defaults and layer resolution
- Config defaults, dependencies_for, save/load, from_env
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from vclight_create.config import Config, RegistryConfig, TemplateConfig


# ---------------------------------------------------------------------------
# RegistryConfig
# ---------------------------------------------------------------------------


class TestRegistryConfig:
    @pytest.mark.unit
    def test_defaults(self):
        registry = RegistryConfig()
        assert registry.url == "https://registry.npmjs.org"
        assert registry.timeout == 15.0
        assert registry.resolve_timeout == 30.0

    @pytest.mark.unit
    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            RegistryConfig(resolve_timeout=0)


# ---------------------------------------------------------------------------
# TemplateConfig
# ---------------------------------------------------------------------------


class TestTemplateConfig:
    @pytest.mark.unit
    def test_default_root_ships_with_package(self):
        templates = TemplateConfig()
        assert templates.root.is_dir()
        assert (templates.root / "base").is_dir()
        assert (templates.root / "router").is_dir()

    @pytest.mark.unit
    def test_default_layers(self):
        templates = TemplateConfig()
        assert templates.layers["router"] == ["base", "router"]
        assert templates.layers["blank"] == ["base"]
        assert templates.plugins == {"prettier": "plugins/prettier"}
        assert templates.directive_extension == ".j2"

    @pytest.mark.unit
    def test_layer_dirs(self, tmp_path: Path):
        templates = TemplateConfig(root=tmp_path)
        assert templates.layer_dirs("router", ["prettier"]) == [
            tmp_path / "base",
            tmp_path / "router",
            tmp_path / "plugins" / "prettier",
        ]

    @pytest.mark.unit
    def test_directive_extension_must_start_with_dot(self):
        with pytest.raises(ValidationError):
            TemplateConfig(directive_extension="j2")


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


class TestConfig:
    @pytest.mark.unit
    def test_defaults(self):
        config = Config()
        assert config.project_version == "0.1.0"
        assert config.scripts == {"serve": "vercel dev"}
        assert config.dependencies == ["vercel", "vclight"]
        assert config.dev_dependencies == ["@vercel/node"]

    @pytest.mark.unit
    def test_dependencies_for_router(self):
        assert Config().dependencies_for("router") == ["vercel", "vclight", "vclight-router"]

    @pytest.mark.unit
    def test_dependencies_for_blank(self):
        assert Config().dependencies_for("blank") == ["vercel", "vclight"]

    @pytest.mark.unit
    def test_save_and_load(self, tmp_path: Path):
        config = Config(project_version="1.0.0", registry=RegistryConfig(url="http://r.local"))
        path = config.save(tmp_path / "nested" / "config.json")
        loaded = Config.load(path)
        assert loaded == config

    @pytest.mark.unit
    def test_from_env_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = Config.from_env()
        assert config == Config()

    @pytest.mark.unit
    def test_from_env_overrides(self, tmp_path: Path):
        env = {
            "VCLIGHT_REGISTRY_URL": "http://mirror.local",
            "VCLIGHT_REGISTRY_TIMEOUT": "2.5",
            "VCLIGHT_RESOLVE_TIMEOUT": "7",
            "VCLIGHT_TEMPLATE_DIR": str(tmp_path),
            "VCLIGHT_PROJECT_VERSION": "0.0.1",
        }
        with patch.dict(os.environ, env, clear=True):
            config = Config.from_env()
        assert config.registry.url == "http://mirror.local"
        assert config.registry.timeout == 2.5
        assert config.registry.resolve_timeout == 7.0
        assert config.templates.root == tmp_path
        assert config.project_version == "0.0.1"
