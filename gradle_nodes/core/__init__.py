"""核心模块: 数据模型、构建模型、路径规则、配置与异常"""
