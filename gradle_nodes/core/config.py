"""集中配置管理

提供统一的配置入口，支持从 YAML 文件加载 + 编程式覆盖。

配置示例 (gradle-nodes.yml):
    workspace_data_dir: .nx/workspace-data
    output_dir: .nx/cache
    hash: ""
    plugin_options:
      testTargetName: test
      ciTargetName: test-ci
      buildTargetName: build
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from gradle_nodes.core.exceptions import ConfigError
from gradle_nodes.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "gradle-nodes.yml"

# 遍历工作区和计算源码哈希时跳过的目录
DEFAULT_IGNORED_DIRS = ["build", ".gradle", ".nx", ".git", "node_modules"]


@dataclass
class Config:
    """全局配置"""

    # 目录（相对路径以工作区根目录为基准）
    workspace_data_dir: str = ".nx/workspace-data"
    output_dir: str = ".nx/cache"

    # 传给 createNodes 的缓存失效后缀
    hash: str = ""

    # 目标重命名选项，如 testTargetName / ciTargetName / <task>TargetName
    plugin_options: dict = field(default_factory=dict)

    ignored_dirs: list[str] = field(default_factory=lambda: list(DEFAULT_IGNORED_DIRS))

    # 自定义扩展 (放不到字段里的配置项)
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str | Path = DEFAULT_CONFIG_FILE) -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        try:
            data = load_yaml(path)
        except (yaml.YAMLError, ValueError) as e:
            raise ConfigError(f"配置文件无效: {path} ({e})") from e
        if not data:
            return cls()
        known = {f.name for f in cls.__dataclass_fields__.values()}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        if not isinstance(matched.get("plugin_options", {}), dict):
            raise ConfigError(f"plugin_options 必须是映射: {path}")
        cfg = cls(**matched)
        cfg.extra = extra
        return cfg

    def resolve(self, workspace_root: str | Path, rel: str) -> Path:
        """将配置中的相对目录解析为工作区下的绝对路径"""
        p = Path(rel)
        return p if p.is_absolute() else Path(workspace_root) / p


# 全局单例，首次 import 时不加载文件；由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str | Path = DEFAULT_CONFIG_FILE) -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.info("配置已加载: %s", path)
    return _current
