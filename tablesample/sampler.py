# sampler.py
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Dict, Mapping, Optional, Union
import logging
import re

from sqlglot import exp

from tablesample.errors import InvalidSpecKind, MissingFraction, UnmarkedRawValue

logger = logging.getLogger(__name__)

KW_TABLESAMPLE = "tablesample"
KW_REPEATABLE = "repeatable"

KEY_FRACTION = "fraction"
KEY_METHOD = "method"
KEY_LEGACY_METHOD = "type"
KEY_REPEATABLE = "repeatable"
KNOWN_KEYS = (KEY_FRACTION, KEY_METHOD, KEY_LEGACY_METHOD, KEY_REPEATABLE)

_numeric_re = re.compile(r'^\s*[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?\s*$')


@dataclass(frozen=True)
class Raw:
    """A value that is already valid SQL, e.g. Raw("1000 ROWS") or Raw("15 PERCENT")."""
    sql: str

    def __str__(self) -> str:
        return self.sql


SampleValue = Union[int, float, Decimal, str, Raw, exp.Expression]
SqlCase = Callable[[str], str]


@dataclass(frozen=True)
class SamplingRequest:
    fraction: SampleValue
    method: Optional[str] = None
    repeatable: Optional[SampleValue] = None


def upper_case(text: str) -> str:
    return text.upper()


def lower_case(text: str) -> str:
    return text.lower()


def preserve_case(text: str) -> str:
    return text


SQL_CASES: Dict[str, SqlCase] = {
    "upper": upper_case,
    "lower": lower_case,
    "preserve": preserve_case,
}


def sql_case_for(name: Optional[str]) -> SqlCase:
    if not name:
        return upper_case
    try:
        return SQL_CASES[name.strip().lower()]
    except KeyError:
        raise ValueError(f"unknown sql case '{name}' (expected one of {', '.join(SQL_CASES)})")


def _is_scalar(value: Any) -> bool:
    # bool is an int subclass but never a meaningful fraction
    if isinstance(value, bool):
        return False
    return isinstance(value, (int, float, Decimal, str, Raw, exp.Expression))


def _is_blank(value: Any) -> bool:
    if isinstance(value, Raw):
        value = value.sql
    return isinstance(value, str) and not value.strip()


def _check_value(name: str, value: Any, strict: bool) -> None:
    if not _is_scalar(value):
        raise InvalidSpecKind(f"tablesample {name} must be a number, a string or Raw, got {type(value).__name__}")
    if strict and isinstance(value, str) and not _numeric_re.match(value):
        raise UnmarkedRawValue(f"tablesample {name} {value!r} is not numeric; wrap it in Raw() to pass it verbatim")


def normalize(spec: Any, strict: bool = False) -> SamplingRequest:
    """
    Turn the caller's tablesample option into a SamplingRequest.

    - a bare scalar is taken as the fraction
    - a mapping may hold 'fraction', 'method' (or the legacy 'type') and 'repeatable'
    - in strict mode plain strings must look numeric; anything else needs Raw()
    """
    if isinstance(spec, SamplingRequest):
        return spec

    if spec is None:
        raise MissingFraction("tablesample requires a fraction")

    if _is_scalar(spec):
        spec = {KEY_FRACTION: spec}
    elif not isinstance(spec, Mapping):
        raise InvalidSpecKind(f"tablesample must be a scalar or a mapping, got {type(spec).__name__}")

    fraction = spec.get(KEY_FRACTION)
    if fraction is None or _is_blank(fraction):
        raise MissingFraction("tablesample requires a fraction")
    _check_value(KEY_FRACTION, fraction, strict)

    method = spec.get(KEY_METHOD)
    if method is None:
        method = spec.get(KEY_LEGACY_METHOD)
    if method is not None and not isinstance(method, str):
        raise InvalidSpecKind(f"tablesample method must be a string, got {type(method).__name__}")

    repeatable = spec.get(KEY_REPEATABLE)
    if _is_blank(repeatable):
        repeatable = None
    if repeatable is not None:
        _check_value(KEY_REPEATABLE, repeatable, strict)

    extra = [k for k in spec if k not in KNOWN_KEYS]
    if extra:
        logger.debug("ignoring unknown tablesample options: %s", ", ".join(map(str, extra)))

    return SamplingRequest(fraction=fraction, method=method or None, repeatable=repeatable)


def tablesample(fraction: Any, options: Union[str, Mapping, None] = None, strict: bool = False) -> SamplingRequest:
    """Resultset-style entry point: tablesample(5), tablesample(5, "bernoulli") or tablesample(5, {...})."""
    if options is None:
        spec: Dict[str, Any] = {}
    elif isinstance(options, str):
        spec = {KEY_METHOD: options}
    elif isinstance(options, Mapping):
        spec = dict(options)
    else:
        raise InvalidSpecKind(f"tablesample options must be a method name or a mapping, got {type(options).__name__}")
    spec[KEY_FRACTION] = fraction
    return normalize(spec, strict=strict)


def _value_sql(value: SampleValue, dialect: Optional[str]) -> str:
    if isinstance(value, exp.Expression):
        return value.sql(dialect=dialect)
    # values are interpolated, not bound
    return str(value)


def render(request: SamplingRequest, sql_case: SqlCase = upper_case, dialect: Optional[str] = None) -> str:
    parts = [sql_case(KW_TABLESAMPLE)]
    if request.method:
        parts.append(sql_case(request.method))
    parts.append(f"({_value_sql(request.fraction, dialect)})")
    if request.repeatable is not None:
        parts.append(sql_case(KW_REPEATABLE))
        parts.append(f"({_value_sql(request.repeatable, dialect)})")
    return " ".join(parts)
