"""Schema introspection and field descriptor generation.

This package reads column and foreign key metadata from a database's
information schema and maps it into field descriptors for code generation.
"""

from fieldgen.assembler import FieldAssembler, locale_group
from fieldgen.config import GeneratorConfig, load_config
from fieldgen.errors import (
    DataAccessError,
    FieldGenError,
    MalformedConstraintError,
    UnmappedTypeError,
    UnmappedTypesError,
)
from fieldgen.generator import (
    generate_schema_fields,
    generate_table_fields,
    scan_unmapped_types,
    to_template_payload,
)
from fieldgen.models import ColumnMetadata, FieldDescriptor, ForeignConstraint

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Models
    "ColumnMetadata",
    "FieldDescriptor",
    "ForeignConstraint",
    # Config
    "GeneratorConfig",
    "load_config",
    # Assembly
    "FieldAssembler",
    "generate_table_fields",
    "generate_schema_fields",
    "scan_unmapped_types",
    "to_template_payload",
    "locale_group",
    # Errors
    "FieldGenError",
    "DataAccessError",
    "UnmappedTypeError",
    "UnmappedTypesError",
    "MalformedConstraintError",
]
