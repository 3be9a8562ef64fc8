"""统一异常体系

所有业务异常继承 LinkPackError，CLI 层可据此输出友好提示。
包容器目录缺失、依赖目标不在本地索引中均不属于异常。
"""

from __future__ import annotations


class LinkPackError(Exception):
    """基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(LinkPackError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class ValidationError(LinkPackError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"


class ManifestError(LinkPackError):
    """包清单 (package.json) 缺失、格式错误或内容冲突"""

    code = "MANIFEST_ERROR"

    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(f"{message}: {path}" if path else message)
        self.path = path


class ProcessError(LinkPackError):
    """外部命令退出码非 0，保留完整输出供上层诊断"""

    code = "PROCESS_ERROR"

    def __init__(
        self, label: str, cmd: list[str], returncode: int,
        stdout: str = "", stderr: str = "",
    ) -> None:
        super().__init__(f"{label}失败 (rc={returncode}): {stderr[:500]}")
        self.label = label
        self.cmd = cmd
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
