"""gradle-nodes: 从 Gradle 任务模型提取可缓存的项目/目标图"""

__version__ = "0.1.0"
