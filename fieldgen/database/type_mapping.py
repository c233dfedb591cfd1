"""Native column type mapping and type parameter resolution."""

import re
from collections.abc import Iterable, Mapping

from fieldgen.errors import UnmappedTypeError
from fieldgen.policies import PrecisionFallback

DECIMAL_TYPES = frozenset({"decimal", "numeric", "double", "double precision", "float", "real"})

DEFAULT_PRECISION = [30, 10]

_PRECISION_PATTERN = re.compile(r"\(\s*(\d+)\s*,\s*(\d+)\s*\)")


class TypeMapper:
    """Map native database types to ORM method names using a lookup table.

    Args:
        mapping: Native type name -> ORM method name. Keys are matched
            case-insensitively.
    """

    def __init__(self, mapping: Mapping[str, str]) -> None:
        self._mapping = {key.strip().lower(): value for key, value in mapping.items()}

    def map(self, native_type: str) -> str:
        """Map a native type.

        Raises:
            UnmappedTypeError: If the type has no entry in the table
        """
        key = native_type.strip().lower()
        if key not in self._mapping:
            raise UnmappedTypeError(native_type)
        return self._mapping[key]

    def is_mapped(self, native_type: str) -> bool:
        return native_type.strip().lower() in self._mapping

    def find_unmapped(self, native_types: Iterable[str]) -> list[str]:
        """Return the distinct unmapped types, in first-seen order."""
        unmapped: list[str] = []
        for native_type in native_types:
            if not self.is_mapped(native_type) and native_type not in unmapped:
                unmapped.append(native_type)
        return unmapped


def resolve_precision(
    length: int | str | None,
    data_type: str,
    column_type: str | None,
    fallback: PrecisionFallback = PrecisionFallback.NONE,
) -> list[int]:
    """Get the type parameters for a column.

    Decimal-family types take (precision, scale) from the full column type,
    e.g. ``numeric(10,2)`` -> ``[10, 2]``. Other types use the declared
    length when it is positive.

    Args:
        length: Declared character length
        data_type: Native data type name
        column_type: Full native column type string
        fallback: What a decimal-family type without (precision,scale) gets

    Returns:
        List of integer type parameters, possibly empty
    """
    if data_type.strip().lower() in DECIMAL_TYPES:
        match = _PRECISION_PATTERN.search(column_type or "")
        if match:
            return [int(match.group(1)), int(match.group(2))]
        if fallback == PrecisionFallback.DEFAULT_PAIR:
            return list(DEFAULT_PRECISION)
        return []

    try:
        declared = int(length) if length is not None else 0
    except (TypeError, ValueError):
        declared = 0

    if declared > 0:
        return [declared]

    return []
