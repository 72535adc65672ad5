# motiondetector/diagnostics.py
# -*- coding: utf-8 -*-
"""
Diagnostic sink used by the estimator, backed by `logging`.
估计器使用的诊断日志接口（基于 `logging`）。

Diagnostics are observability only and never affect detection.
诊断信息仅用于观测，不影响检测结果。
"""

import logging
from typing import Any, Dict, Optional, Protocol


class DiagnosticLogger(Protocol):
    """Leveled, tagged diagnostic messages plus contextual metadata."""

    def d(self, tag: str, message: str) -> None: ...

    def w(self, tag: str, message: str, exc: Optional[BaseException] = None) -> None: ...

    def e(self, tag: str, message: str, exc: Optional[BaseException] = None) -> None: ...

    def set_context(self, key: str, value: Any) -> None: ...

    def count(self, tag: str, counter_name: str, log_every: int = 100) -> None: ...


class StdlibDiagnosticLogger:
    """
    DiagnosticLogger on top of a stdlib logger.
    基于标准库 logger 的诊断实现。

    Context key/values are appended to each record as `extra["context"]`
    and rendered after the message.
    """

    def __init__(self, name: str = "motiondetector") -> None:
        self.logger = logging.getLogger(name)
        self.context: Dict[str, Any] = {}
        self.counters: Dict[str, int] = {}

    def _log(
        self,
        level: int,
        tag: str,
        message: str,
        exc: Optional[BaseException] = None,
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        suffix = ""
        if self.context:
            suffix = " " + " ".join(f"{k}={v}" for k, v in sorted(self.context.items()))
        self.logger.log(
            level,
            "[%s] %s%s",
            tag,
            message,
            suffix,
            exc_info=exc,
            extra={"tag": tag, "context": dict(self.context)},
        )

    def d(self, tag: str, message: str) -> None:
        self._log(logging.DEBUG, tag, message)

    def w(self, tag: str, message: str, exc: Optional[BaseException] = None) -> None:
        self._log(logging.WARNING, tag, message, exc)

    def e(self, tag: str, message: str, exc: Optional[BaseException] = None) -> None:
        self._log(logging.ERROR, tag, message, exc)

    def set_context(self, key: str, value: Any) -> None:
        self.context[key] = value

    def count(self, tag: str, counter_name: str, log_every: int = 100) -> None:
        """Increment a named counter and log every `log_every` hits."""
        key = f"{tag}:{counter_name}"
        n = self.counters.get(key, 0) + 1
        self.counters[key] = n
        if log_every > 0 and n % log_every == 0:
            self.d(tag, f"{counter_name}={n}")


class NullDiagnosticLogger:
    """Discards everything."""

    def d(self, tag, message):
        pass

    def w(self, tag, message, exc=None):
        pass

    def e(self, tag, message, exc=None):
        pass

    def set_context(self, key, value):
        pass

    def count(self, tag, counter_name, log_every=100):
        pass


def setup_logging(level: str = "INFO") -> None:
    """Basic console logging for CLI scripts. 命令行脚本的基础日志配置。"""
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
