"""通用工具: 日志、文件读写、子进程执行"""
