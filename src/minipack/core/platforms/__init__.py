from __future__ import annotations

from .alipay import AliFormatAdapter
from .base import FormatAdapter
from .wechat import WxFormatAdapter
from .registry import select_adapter

__all__ = [
    "FormatAdapter",
    "WxFormatAdapter",
    "AliFormatAdapter",
    "select_adapter",
]
