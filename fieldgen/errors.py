"""Exceptions raised while reading schema metadata and building field descriptors."""

from typing import Any


class FieldGenError(Exception):
    """Base class for all field generation errors."""


class DataAccessError(FieldGenError):
    """A metadata query failed or the requested table does not exist."""

    def __init__(self, message: str, table_name: str | None = None) -> None:
        super().__init__(message)
        self.table_name = table_name


class UnmappedTypeError(FieldGenError):
    """A native column type has no entry in the configured type map."""

    def __init__(self, native_type: str) -> None:
        super().__init__(f"The type '{native_type}' is not mapped in the 'data_type_map' configuration")
        self.native_type = native_type


class UnmappedTypesError(FieldGenError):
    """Every unmapped native type found while scanning several tables.

    Args:
        types_by_table: Mapping of table name to the unmapped types it uses
    """

    def __init__(self, types_by_table: dict[str, list[str]]) -> None:
        self.types_by_table = types_by_table
        distinct = sorted({t for types in types_by_table.values() for t in types})
        super().__init__(f"Unmapped types found in {len(types_by_table)} table(s): {', '.join(distinct)}")

    @property
    def native_types(self) -> list[str]:
        return sorted({t for types in self.types_by_table.values() for t in types})


class MalformedConstraintError(FieldGenError):
    """A foreign key row is missing its source column or referenced table/column."""

    def __init__(self, table_name: str, row: dict[str, Any]) -> None:
        super().__init__(f"Malformed foreign key constraint on table '{table_name}': {row}")
        self.table_name = table_name
        self.row = row
