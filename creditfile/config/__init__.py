import json
import logging
import os
import re
from dataclasses import dataclass
from typing import Any, Mapping

from environs import Env

env = Env()
env.read_env()

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT_ID = "subject:default"
DEFAULT_CURRENCY_CODE = "GBP"
DEFAULT_SCHEMA_VERSION = "1.0.0"

_CURRENCY_RE = re.compile(r"^[A-Z]{3}$")

_WARNED_DEFAULT_KEYS: set[str] = set()


class InvalidConfigError(ValueError):
    """Raised when an explicit configuration value cannot be accepted."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__(f"{key}: {message}")
        self.key = key


@dataclass(frozen=True)
class NormalizerConfig:
    """Per-run settings handed to the normalization engine."""

    default_subject_id: str = DEFAULT_SUBJECT_ID
    currency_code: str = DEFAULT_CURRENCY_CODE
    schema_version: str = DEFAULT_SCHEMA_VERSION

    def __post_init__(self) -> None:
        if not str(self.default_subject_id or "").strip():
            raise InvalidConfigError("default_subject_id", "must be a non-empty string")
        if not _CURRENCY_RE.match(str(self.currency_code or "")):
            raise InvalidConfigError(
                "currency_code", f"expected a 3-letter ISO code, got {self.currency_code!r}"
            )


def _warn_default(key: str, raw: object, default: object, reason: str) -> None:
    """Emit a structured warning when falling back to a default value."""

    if key in _WARNED_DEFAULT_KEYS:
        return

    _WARNED_DEFAULT_KEYS.add(key)
    payload = {
        "key": key,
        "value": "" if raw is None else str(raw),
        "default": default,
        "reason": reason,
    }
    logger.warning("CREDITFILE_CONFIG_DEFAULT %s", json.dumps(payload, sort_keys=True))


def _check_non_empty_str(raw: object) -> str | None:
    value = str(raw).strip()
    return value or None


def _check_currency(raw: object) -> str | None:
    value = str(raw).strip().upper()
    return value if _CURRENCY_RE.match(value) else None


def _coerce_non_empty_str(key: str, default: str) -> str:
    raw = os.getenv(key)
    if raw is None:
        return default
    value = _check_non_empty_str(raw)
    if value:
        return value
    _warn_default(key, raw, default, "empty")
    return default


def _coerce_currency(key: str, default: str) -> str:
    raw = os.getenv(key)
    if raw is None:
        return default
    value = _check_currency(raw)
    if value:
        return value
    _warn_default(key, raw, default, "invalid_currency_code")
    return default


def mapping_rules_path() -> str | None:
    """Return the mapping rules override path, if configured."""

    raw = env.str("CREDITFILE_MAPPING_RULES_PATH", "") or ""
    raw = raw.strip()
    return raw or None


def load_normalizer_config() -> NormalizerConfig:
    """Build :class:`NormalizerConfig` from ``CREDITFILE_*`` environment variables.

    Invalid values never raise; they fall back to the defaults with a one-time
    ``CREDITFILE_CONFIG_DEFAULT`` warning per key.
    """

    return NormalizerConfig(
        default_subject_id=_coerce_non_empty_str("CREDITFILE_DEFAULT_SUBJECT_ID", DEFAULT_SUBJECT_ID),
        currency_code=_coerce_currency("CREDITFILE_CURRENCY_CODE", DEFAULT_CURRENCY_CODE),
        schema_version=_coerce_non_empty_str("CREDITFILE_SCHEMA_VERSION", DEFAULT_SCHEMA_VERSION),
    )


_CONFIG_KEYS = {
    "default_subject_id": (("default_subject_id", "defaultSubjectId"), _check_non_empty_str),
    "currency_code": (("currency_code", "currencyCode"), _check_currency),
    "schema_version": (("schema_version", "schemaVersion"), _check_non_empty_str),
}


def coerce_config(
    config: NormalizerConfig | Mapping[str, Any] | None,
    rejected: list[tuple[str, object]] | None = None,
) -> NormalizerConfig:
    """Accept a ready config, a camelCase/snake_case mapping, or ``None``.

    Keys missing from a mapping take their values from the environment. Values
    that fail their checks keep the environment/default value and are appended
    to ``rejected`` as ``(key, raw_value)`` pairs; a non-mapping ``config`` is
    ignored the same way under the key ``config``.
    """

    if isinstance(config, NormalizerConfig):
        return config
    base = load_normalizer_config()
    if config is None:
        return base
    if rejected is None:
        rejected = []
    if not isinstance(config, Mapping):
        logger.warning("CREDITFILE_CONFIG_IGNORED type=%s", type(config).__name__)
        rejected.append(("config", type(config).__name__))
        return base

    values: dict[str, Any] = {
        "default_subject_id": base.default_subject_id,
        "currency_code": base.currency_code,
        "schema_version": base.schema_version,
    }
    for target, (aliases, check) in _CONFIG_KEYS.items():
        for alias in aliases:
            if alias not in config or config[alias] is None:
                continue
            value = check(config[alias])
            if value is None:
                logger.warning("CREDITFILE_CONFIG_REJECTED key=%s value=%r", target, config[alias])
                rejected.append((target, config[alias]))
            else:
                values[target] = value
            break
    return NormalizerConfig(**values)


__all__ = [
    "DEFAULT_CURRENCY_CODE",
    "DEFAULT_SCHEMA_VERSION",
    "DEFAULT_SUBJECT_ID",
    "InvalidConfigError",
    "NormalizerConfig",
    "coerce_config",
    "env",
    "load_normalizer_config",
    "mapping_rules_path",
]
