from __future__ import annotations

"""
Configuration Validation Service.

Gatekeeper between the host (CLI, config file, embedding bundler) and the
resolution engine. Coerces untrusted values into typed options, fills
missing keys with defaults and anchors relative paths at the project
context directory.
"""

import logging
import os
from typing import Any, Dict, List, Tuple, Union

from minipack.domain.config import SUPPORTED_TARGETS, get_default_config
from minipack.domain.constants import DEFAULT_RESOLVE_EXTENSIONS
from minipack.infra.fs import normalize_path

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize the provided configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raises exceptions on type mismatch instead of coercing.

    Returns:
        Tuple[Dict[str, Any], List[str]]: The normalized configuration and a
                                          list of warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    # 1. Base Type Validation
    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    # 2. Scalar fields
    merged["context"] = normalize_path(
        _as_str(merged.get("context"), defaults["context"], "context", warnings, strict),
        defaults["context"],
    )
    merged["output_path"] = _as_str(
        merged.get("output_path"), defaults["output_path"], "output_path", warnings, strict
    )
    merged["target"] = _as_target(merged.get("target"), warnings, strict)

    merged["common_subpackages"] = _as_bool(
        merged.get("common_subpackages"), defaults["common_subpackages"], "common_subpackages", warnings, strict
    )

    # 3. Compound fields
    merged["entry"] = _as_entry(merged.get("entry"), defaults["entry"], warnings, strict)
    merged["resources"] = _as_path_list(merged.get("resources"), [], "resources", warnings, strict)
    merged["extensions"] = _as_extensions(merged.get("extensions"), warnings, strict)
    merged["alias"] = _as_str_map(merged.get("alias"), "alias", warnings, strict)
    merged["extfile"] = _as_extfile(merged.get("extfile"), warnings, strict)

    # 4. Path anchoring
    context = merged["context"]
    merged["resources"] = [os.path.normpath(os.path.join(context, r)) for r in merged["resources"]]
    merged["alias"] = {
        key: os.path.normpath(os.path.join(context, target)) if target.startswith(".") else target
        for key, target in merged["alias"].items()
    }

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _reject(msg: str, warnings: List[str], strict: bool, fallback_note: str = "Using fallback.") -> None:
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} {fallback_note}")


def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Non-empty, stripped string or the fallback."""
    if isinstance(value, str):
        return value.strip() or fallback
    if value is not None:
        _reject(f"Invalid field '{field}': expected str, received {type(value).__name__}.", warnings, strict)
    return fallback


_TRUE_WORDS = ("true", "yes", "on", "1")
_FALSE_WORDS = ("false", "no", "off", "0")


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Booleans pass through; flag words from config files are converted."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    word = value.strip().lower() if isinstance(value, str) else None
    if not strict and word in _TRUE_WORDS + _FALSE_WORDS:
        converted = word in _TRUE_WORDS
        warnings.append(f"Field '{field}' converted from '{value}' to {converted}.")
        return converted

    _reject(f"Invalid field '{field}': expected bool, received {type(value).__name__}.", warnings, strict)
    return fallback


def _as_path_list(value: Any, fallback: List[str], field: str, warnings: List[str], strict: bool) -> List[str]:
    """Path options: a single path or a list of paths."""
    if value is None:
        return list(fallback)
    if isinstance(value, str):
        return [value.strip()] if value.strip() else list(fallback)
    if not isinstance(value, (list, tuple)):
        _reject(f"Invalid field '{field}': expected list[str], received {type(value).__name__}.", warnings, strict)
        return list(fallback)

    out: List[str] = []
    for i, item in enumerate(value):
        if isinstance(item, str) and item.strip():
            out.append(item.strip())
        else:
            _reject(f"Invalid item in '{field}[{i}]': expected non-empty str.", warnings, strict, "Item discarded.")
    return out or list(fallback)


def _as_str_map(value: Any, field: str, warnings: List[str], strict: bool) -> Dict[str, str]:
    """Keep the string-to-string pairs of a mapping."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        _reject(f"Invalid field '{field}': expected dict, received {type(value).__name__}.", warnings, strict)
        return {}

    out: Dict[str, str] = {}
    for key, target in value.items():
        if isinstance(key, str) and isinstance(target, str) and key and target:
            out[key] = target
        else:
            _reject(f"Invalid item in '{field}[{key!r}]': expected non-empty str.", warnings, strict, "Item discarded.")
    return out


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: DOMAIN NORMALIZATION
# -----------------------------------------------------------------------------

def _as_target(value: Any, warnings: List[str], strict: bool) -> str:
    target = value.strip().lower() if isinstance(value, str) else value
    if target in SUPPORTED_TARGETS:
        return target

    msg = f"Unsupported target {value!r}: expected one of {', '.join(SUPPORTED_TARGETS)}."
    if strict:
        raise ValueError(msg)
    warnings.append(f"{msg} Using '{SUPPORTED_TARGETS[0]}'.")
    return SUPPORTED_TARGETS[0]


def _as_entry(
        value: Any,
        fallback: List[str],
        warnings: List[str],
        strict: bool,
) -> Union[str, List[str], Dict[str, str]]:
    """Entries stay in their host shape (str, list or name -> path dict)."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    if isinstance(value, dict):
        return _as_str_map(value, "entry", warnings, strict) or list(fallback)
    return _as_path_list(value, fallback, "entry", warnings, strict)


def _as_extfile(value: Any, warnings: List[str], strict: bool) -> Union[bool, str]:
    if isinstance(value, str) and value.strip().lower() not in _TRUE_WORDS + _FALSE_WORDS + ("",):
        return value.strip()
    return _as_bool(value, True, "extfile", warnings, strict)


def _as_extensions(value: Any, warnings: List[str], strict: bool) -> List[str]:
    """Resolution extensions, dot-prefixed and deduplicated in order."""
    out: List[str] = []
    for ext in _as_path_list(value, DEFAULT_RESOLVE_EXTENSIONS, "extensions", warnings, strict):
        if not ext.startswith("."):
            if strict:
                raise ValueError(f"Invalid extension '{ext}': must start with '.'.")
            warnings.append(f"Extension '{ext}' corrected to '.{ext}'.")
            ext = "." + ext
        if ext not in out:
            out.append(ext)
    return out
