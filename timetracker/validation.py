"""Validators for user-supplied settings."""

from __future__ import annotations

from functools import reduce
from typing import Callable, Iterable, TypeVar

T = TypeVar("T")

_INVALID_PATH_CHARS = frozenset('<>:"|?*')


class ValidationError(ValueError):
    """Raised when a value fails validation."""


def validate_interval(interval: int) -> int:
    """Check a monitoring interval in seconds (1 to 3600)."""
    if interval == 0:
        raise ValidationError("监控间隔不能为0")
    if interval < 0:
        raise ValidationError("监控间隔必须为正数")
    if interval > 3600:
        raise ValidationError("监控间隔不能超过1小时(3600秒)")
    return interval


def validate_file_path(path: str) -> str:
    """Check that a path is non-empty and has no forbidden characters."""
    if not path:
        raise ValidationError("文件路径不能为空")
    if any(char in _INVALID_PATH_CHARS for char in path):
        raise ValidationError("文件路径包含非法字符")
    return path


def validate_api_key(key: str) -> str:
    """Check that an API key is long enough and has no spaces."""
    if not key:
        raise ValidationError("API密钥不能为空")
    if len(key.encode("utf-8")) < 10:
        raise ValidationError("API密钥长度过短")
    if " " in key:
        raise ValidationError("API密钥不能包含空格")
    return key


def validate_model_name(name: str) -> str:
    """Check that a model name uses only letters, digits, '-', '_' and '.'."""
    if not name:
        raise ValidationError("模型名称不能为空")
    if not all(char.isalnum() or char in "-_." for char in name):
        raise ValidationError("模型名称只能包含字母、数字、连字符、下划线和点")
    return name


def validate_url(url: str) -> str:
    """Check that a URL starts with http:// or https://."""
    if not url:
        raise ValidationError("URL不能为空")
    if not url.startswith(("http://", "https://")):
        raise ValidationError("URL必须以http://或https://开头")
    return url


def validate_temperature(temp: float) -> float:
    """Check that a sampling temperature lies in [0.0, 2.0]."""
    if not 0.0 <= temp <= 2.0:
        raise ValidationError("温度参数必须在0.0到2.0之间")
    return temp


def validate_max_tokens(tokens: int) -> int:
    """Check a token limit between 1 and 100000."""
    if tokens == 0:
        raise ValidationError("最大token数不能为0")
    if tokens < 0:
        raise ValidationError("最大token数必须为正数")
    if tokens > 100000:
        raise ValidationError("最大token数不能超过100000")
    return tokens


def compose_validators(validators: Iterable[Callable[[T], T]]) -> Callable[[T], T]:
    """Chain validators; each receives the previous one's result."""
    chain = list(validators)

    def validate(value: T) -> T:
        return reduce(lambda acc, validator: validator(acc), chain, value)

    return validate