"""
文章 slug 生成
标题转小写、去掉非字母数字字符、空白折叠为连字符，再追加 36 进制毫秒时间戳保证唯一
"""

import re
import threading
import time
from datetime import datetime
from typing import Optional

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"

_INVALID_CHARS = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")

_stamp_lock = threading.Lock()
_last_stamp = 0


def to_base36(value: int) -> str:
    """非负整数转 36 进制字符串"""
    if value < 0:
        raise ValueError("value 必须为非负整数")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_DIGITS[rem])
    return "".join(reversed(digits))


def slugify_title(title: str) -> str:
    """只做标题规范化，不带时间戳后缀"""
    s = (title or "").lower()
    s = _INVALID_CHARS.sub("", s)
    s = _WHITESPACE.sub("-", s)
    s = _HYPHENS.sub("-", s)
    return s.strip("-")


def _next_stamp(now_ms: int) -> int:
    # 同一毫秒内的多次调用顺延 1ms，保证后缀不重复
    global _last_stamp
    with _stamp_lock:
        stamp = max(now_ms, _last_stamp + 1)
        _last_stamp = stamp
        return stamp


def generate_slug(title: str, now: Optional[datetime] = None) -> str:
    """
    根据标题生成唯一 slug

    结果只包含小写字母、数字和连字符，且首尾不是连字符；
    标题中没有可用字符时只返回时间戳后缀
    """
    now_ms = int(now.timestamp() * 1000) if now is not None else time.time_ns() // 1_000_000
    suffix = to_base36(_next_stamp(now_ms))
    base = slugify_title(title)
    return f"{base}-{suffix}" if base else suffix
