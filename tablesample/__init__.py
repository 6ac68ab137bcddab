from tablesample.errors import (
    InvalidSpecKind,
    MissingFraction,
    TableSampleError,
    UnmarkedRawValue,
    UnsupportedJoinTarget,
)
from tablesample.parser import FromTarget, JoinInfo, TableInfo, from_target, parse_statement
from tablesample.rewriter import apply_tablesample, attach_to_from, resolve_attrs
from tablesample.sampler import (
    Raw,
    SamplingRequest,
    lower_case,
    normalize,
    preserve_case,
    render,
    sql_case_for,
    tablesample,
    upper_case,
)

__version__ = "0.1.0"

__all__ = [
    'Raw',
    'SamplingRequest',
    'normalize',
    'render',
    'tablesample',
    'attach_to_from',
    'apply_tablesample',
    'resolve_attrs',
    'FromTarget',
    'TableInfo',
    'JoinInfo',
    'from_target',
    'parse_statement',
    'upper_case',
    'lower_case',
    'preserve_case',
    'sql_case_for',
    'TableSampleError',
    'InvalidSpecKind',
    'MissingFraction',
    'UnsupportedJoinTarget',
    'UnmarkedRawValue',
]
