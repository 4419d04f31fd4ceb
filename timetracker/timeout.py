"""Timeouts, retries, error advice and scoped cleanup."""

from __future__ import annotations

import asyncio
import logging
import queue
import threading
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


class OperationTimeoutError(RuntimeError):
    """Raised when an operation does not finish within its time limit."""


@dataclass
class TimeoutConfig:
    """Time limits in seconds for the tracker's slow operations."""

    permission_check: float = 5.0
    daemon_start: float = 10.0
    daemon_stop: float = 5.0
    monitor_init: float = 15.0
    system_info: float = 3.0


@dataclass
class RetryConfig:
    """Retry policy with exponential backoff; delays are in seconds."""

    max_attempts: int = 3
    initial_delay: float = 0.1
    max_delay: float = 5.0
    backoff_multiplier: float = 2.0


async def with_timeout(
    awaitable: Awaitable[T], timeout: float, operation_name: str
) -> T:
    """Await ``awaitable``, raising OperationTimeoutError after ``timeout`` seconds."""
    try:
        return await asyncio.wait_for(awaitable, timeout)
    except asyncio.TimeoutError:
        message = f"操作 '{operation_name}' 超时 ({timeout:g}s)"
        logger.error(message)
        raise OperationTimeoutError(message) from None


def with_sync_timeout(
    operation: Callable[[], T], timeout: float, operation_name: str
) -> T:
    """Run ``operation`` in a worker thread and wait at most ``timeout`` seconds.

    On timeout the worker keeps running in the background; it cannot be
    stopped, only abandoned.
    """
    results: queue.Queue[tuple[bool, Any]] = queue.Queue(maxsize=1)

    def run() -> None:
        try:
            results.put((True, operation()))
        except BaseException as exc:  # handed back to the caller
            results.put((False, exc))

    worker = threading.Thread(target=run, name=f"timeout-{operation_name}", daemon=True)
    worker.start()
    try:
        succeeded, payload = results.get(timeout=timeout)
    except queue.Empty:
        message = f"同步操作 '{operation_name}' 超时 ({timeout:g}s)"
        logger.error(message)
        raise OperationTimeoutError(message) from None
    worker.join()
    if succeeded:
        return payload
    raise payload


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    config: RetryConfig | None = None,
    operation_name: str = "operation",
) -> T:
    """Call ``operation`` until it succeeds or the attempts run out.

    The last failure is re-raised once every attempt has failed.
    """
    policy = config if config is not None else RetryConfig()
    delay = policy.initial_delay
    last_error: Exception | None = None

    for attempt in range(1, policy.max_attempts + 1):
        try:
            result = await operation()
        except Exception as exc:
            last_error = exc
            if attempt < policy.max_attempts:
                logger.warning(
                    "操作 '%s' 第 %d 次尝试失败，%gs 后重试: %s",
                    operation_name,
                    attempt,
                    delay,
                    exc,
                )
                await asyncio.sleep(delay)
                delay = min(delay * policy.backoff_multiplier, policy.max_delay)
            else:
                logger.error(
                    "操作 '%s' 在 %d 次尝试后仍然失败", operation_name, policy.max_attempts
                )
        else:
            if attempt > 1:
                logger.info("操作 '%s' 在第 %d 次尝试后成功", operation_name, attempt)
            return result

    if last_error is not None:
        raise last_error
    raise RuntimeError("未知错误")


def handle_error(error: BaseException, operation: str) -> str:
    """Log a failure and return its message followed by a suggestion."""
    text = str(error)
    message = f"操作 '{operation}' 失败: {text}"

    if "permission" in text or "权限" in text:
        suggestion = "建议运行 'timetracker permissions request' 来获取必要权限"
    elif "timeout" in text or "超时" in text:
        suggestion = "操作超时，请检查系统负载或网络连接"
    elif "not found" in text or "找不到" in text:
        suggestion = "请确保所有依赖项已正确安装"
    else:
        suggestion = "请查看日志文件获取详细信息"

    logger.error(message)
    logger.info("建议: %s", suggestion)
    return f"{message}\n建议: {suggestion}"


class ResourceGuard:
    """Run a cleanup callback when the ``with`` block ends, unless disarmed."""

    def __init__(self, cleanup: Callable[[], Any]) -> None:
        self._cleanup: Callable[[], Any] | None = cleanup

    def disarm(self) -> None:
        """Cancel the pending cleanup."""
        self._cleanup = None

    def __enter__(self) -> ResourceGuard:
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        cleanup, self._cleanup = self._cleanup, None
        if cleanup is not None:
            cleanup()
        return False