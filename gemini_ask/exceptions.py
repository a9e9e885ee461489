"""gemini-ask 异常定义。"""


class AskConfigError(RuntimeError):
    """启动配置无效：缺少系统指令文件、模型目录错误或环境变量取值非法。"""


class AskValidationError(ValueError):
    """运行参数无效，例如 API key 为空。"""


__all__ = [
    "AskConfigError",
    "AskValidationError",
]
