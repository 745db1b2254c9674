from __future__ import annotations

"""
Format Adapter Selection.
"""

from typing import Dict, Type

from minipack.core.platforms.alipay import AliFormatAdapter
from minipack.core.platforms.base import FormatAdapter
from minipack.core.platforms.wechat import WxFormatAdapter
from minipack.domain.errors import ConfigurationError

_ADAPTERS: Dict[str, Type[FormatAdapter]] = {
    "wx": WxFormatAdapter,
    "ali": AliFormatAdapter,
}


def select_adapter(target: str) -> FormatAdapter:
    """
    Instantiate the adapter for a build target.

    Raises:
        ConfigurationError: If the target is unknown.
    """
    adapter_cls = _ADAPTERS.get((target or "").strip().lower())
    if adapter_cls is None:
        raise ConfigurationError(
            f"Unknown target '{target}'. Expected one of: {', '.join(sorted(_ADAPTERS))}"
        )
    return adapter_cls()
