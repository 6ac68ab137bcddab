class TableSampleError(ValueError):
    pass


class InvalidSpecKind(TableSampleError):
    """tablesample options must be a scalar fraction or a mapping."""


class MissingFraction(TableSampleError):
    pass


class UnsupportedJoinTarget(TableSampleError):
    """tablesample on joins is not supported."""


class UnmarkedRawValue(TableSampleError):
    """Strict mode: a non-numeric string was given without the Raw marker."""
