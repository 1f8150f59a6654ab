"""gradle-nodes 日志配置

日志统一输出到 stderr，stdout 保留给 createNodes 打印的产物路径。
JSON 模式下，流水线通过 extra= 传入的上下文字段（模块路径、入口脚本、
构建文件）会作为顶层键输出，便于在 CI 中按模块过滤。

环境变量:
    GRADLE_NODES_LOG_LEVEL: 日志级别，默认 INFO
    GRADLE_NODES_LOG_JSON:  为 "1" 时输出 JSON 行
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Mapping

LOG_LEVEL_ENV = "GRADLE_NODES_LOG_LEVEL"
LOG_JSON_ENV = "GRADLE_NODES_LOG_JSON"

# 可通过 extra= 附加到日志记录上的上下文字段
CONTEXT_FIELDS = ("module_path", "entry_script", "build_file")

TEXT_FORMAT = "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """每条记录一行 JSON

    输出示例:
        {"timestamp": "...", "level": "WARNING",
         "logger": "gradle_nodes.extract.emitter",
         "message": "CreateNodes: 模块 :app 提取失败，已跳过: ...",
         "module_path": ":app"}
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                entry[name] = value
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(level: str = "INFO", json_output: bool = False) -> None:
    """替换根日志器的处理器，输出到 stderr"""
    reset_logging()
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if json_output else logging.Formatter(TEXT_FORMAT))
    root.addHandler(handler)


def setup_logging_from_env(environ: Mapping[str, str] | None = None) -> None:
    """按 GRADLE_NODES_LOG_LEVEL / GRADLE_NODES_LOG_JSON 配置日志"""
    env = os.environ if environ is None else environ
    setup_logging(
        level=env.get(LOG_LEVEL_ENV, "INFO"),
        json_output=env.get(LOG_JSON_ENV, "") == "1",
    )


def reset_logging() -> None:
    """移除并关闭根日志器上的全部处理器"""
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
