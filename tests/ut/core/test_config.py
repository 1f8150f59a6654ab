"""配置加载测试"""

from __future__ import annotations

from pathlib import Path

import pytest

from gradle_nodes.core import config as config_mod
from gradle_nodes.core.config import DEFAULT_IGNORED_DIRS, Config, get_config, init_config
from gradle_nodes.core.exceptions import ConfigError


class TestConfig:
    def test_defaults_when_missing(self, tmp_path):
        cfg = Config.from_file(tmp_path / "gradle-nodes.yml")
        assert cfg.workspace_data_dir == ".nx/workspace-data"
        assert cfg.output_dir == ".nx/cache"
        assert cfg.hash == ""
        assert cfg.plugin_options == {}
        assert cfg.ignored_dirs == DEFAULT_IGNORED_DIRS

    def test_load_with_extra(self, tmp_path):
        path = tmp_path / "gradle-nodes.yml"
        path.write_text(
            "hash: abc\n"
            "plugin_options:\n"
            "  ciTargetName: test-ci\n"
            "team: build-infra\n",
            encoding="utf-8",
        )
        cfg = Config.from_file(path)
        assert cfg.hash == "abc"
        assert cfg.plugin_options == {"ciTargetName": "test-ci"}
        assert cfg.extra == {"team": "build-infra"}

    def test_invalid_yaml_raises(self, tmp_path):
        path = tmp_path / "gradle-nodes.yml"
        path.write_text("plugin_options: [oops", encoding="utf-8")
        with pytest.raises(ConfigError, match="配置文件无效"):
            Config.from_file(path)

    def test_plugin_options_must_be_mapping(self, tmp_path):
        path = tmp_path / "gradle-nodes.yml"
        path.write_text("plugin_options: [a, b]\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="plugin_options"):
            Config.from_file(path)

    def test_resolve(self):
        cfg = Config()
        assert cfg.resolve("/ws", ".nx/cache") == Path("/ws/.nx/cache")
        assert cfg.resolve("/ws", "/abs/dir") == Path("/abs/dir")


class TestGlobalConfig:
    @pytest.fixture(autouse=True)
    def _reset(self, monkeypatch):
        monkeypatch.setattr(config_mod, "_current", None)

    def test_get_config_default(self):
        assert get_config() == Config()

    def test_init_config_replaces_current(self, tmp_path):
        path = tmp_path / "gradle-nodes.yml"
        path.write_text("output_dir: out\n", encoding="utf-8")
        cfg = init_config(path)
        assert get_config() is cfg
        assert cfg.output_dir == "out"
