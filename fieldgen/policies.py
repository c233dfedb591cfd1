"""Policy constants for behaviour that differs between database dialects."""

from enum import Enum


class AutoIncrementPolicy(str, Enum):
    """How a column is recognised as server-generated sequential."""

    DEFAULT_PREFIX = "default_prefix"  # default starts with the dialect's sequence marker
    NAME_IS_ID = "name_is_id"  # the column is the 'id' column
    EXTRA_FLAG = "extra_flag"  # MySQL EXTRA contains AUTO_INCREMENT


class PrecisionFallback(str, Enum):
    """Parameters used for a decimal-family column whose type string carries no (precision,scale)."""

    DEFAULT_PAIR = "default_pair"  # [30, 10]
    NONE = "none"  # []


class PrimaryKeyMatch(str, Enum):
    """How the column name is compared against 'id'."""

    EXACT = "exact"
    NORMALIZED = "normalized"  # trimmed and case-insensitive
