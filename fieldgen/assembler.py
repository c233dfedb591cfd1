"""Build field descriptors from a table's schema metadata."""

import logging
import re
from collections.abc import Iterable

from sqlalchemy.engine import Connection

from fieldgen.config import GeneratorConfig
from fieldgen.database.dialects import Dialect
from fieldgen.database.introspection import ColumnIntrospector
from fieldgen.database.relationships import ConstraintExtractor
from fieldgen.database.type_mapping import TypeMapper, resolve_precision
from fieldgen.models import ColumnMetadata, FieldDescriptor, ForeignConstraint, Labels, Options
from fieldgen.policies import AutoIncrementPolicy, PrecisionFallback, PrimaryKeyMatch

logger = logging.getLogger(__name__)

PRIMARY_KEY_NAME = "id"

_ENUM_PATTERN = re.compile(r"enum\((.*?)\)$", re.IGNORECASE | re.DOTALL)
_ENUM_LITERAL_PATTERN = re.compile(r"'((?:[^']|'')*)'")


class FieldAssembler:
    """Turn the columns of a table into an ordered list of FieldDescriptor.

    One assembler owns one foreign key cache, so reuse it only from a single
    thread.

    Args:
        connection: Open SQLAlchemy connection
        dialect: Query strategy for the connected database
        config: Type maps, exclusions, languages and policy overrides
    """

    def __init__(self, connection: Connection, dialect: Dialect, config: GeneratorConfig | None = None) -> None:
        self.dialect = dialect
        self.config = config or GeneratorConfig()
        self.introspector = ColumnIntrospector(connection, dialect)
        self.constraints = ConstraintExtractor(connection, dialect)
        self.type_mapper = TypeMapper(self.config.data_type_map)

    @property
    def auto_increment_policy(self) -> AutoIncrementPolicy:
        return self.config.auto_increment_policy or self.dialect.auto_increment_policy

    @property
    def precision_fallback(self) -> PrecisionFallback:
        return self.config.precision_fallback or self.dialect.precision_fallback

    @property
    def primary_key_match(self) -> PrimaryKeyMatch:
        return self.config.primary_key_match or self.dialect.primary_key_match

    @property
    def languages(self) -> list[str]:
        return self.config.languages

    def assemble(self, table_name: str, catalog: str) -> list[FieldDescriptor]:
        """Build one descriptor per column of a table, in column order.

        Args:
            table_name: Table name
            catalog: Catalog/schema name

        Returns:
            List of FieldDescriptor

        Raises:
            DataAccessError: If a metadata query fails or the table is missing
            UnmappedTypeError: If a column type is not in the type map
            MalformedConstraintError: If a foreign key row is incomplete
        """
        columns = self.introspector.get_columns(table_name, catalog)
        fields = [self.build_field(table_name, catalog, column) for column in columns]
        logger.info(f"Assembled {len(fields)} fields for table '{table_name}'")
        return fields

    def assemble_many(self, table_names: Iterable[str], catalog: str) -> dict[str, list[FieldDescriptor]]:
        """Assemble several tables. Foreign keys are cached per table."""
        return {table_name: self.assemble(table_name, catalog) for table_name in table_names}

    def build_field(self, table_name: str, catalog: str, column: ColumnMetadata) -> FieldDescriptor:
        """Build the descriptor for a single column."""
        is_primary = self.is_primary_name(column.name)
        options = self.get_options(column)

        foreign_constraint: ForeignConstraint | None = None
        is_foreign_relation = not self.config.is_foreign_constraint_ignored(table_name, column.name)
        if is_foreign_relation:
            foreign_constraint = self.constraints.get_constraint(table_name, catalog, column.name)

        return FieldDescriptor(
            name=column.name,
            labels=self.get_labels(column.name),
            is_nullable=column.is_nullable.strip().upper() == self.dialect.nullable_sentinel.upper(),
            data_value=column.default,
            data_type=self.type_mapper.map(column.data_type),
            data_type_params=resolve_precision(
                column.character_maximum_length,
                column.data_type,
                column.column_type,
                fallback=self.precision_fallback,
            ),
            is_primary=is_primary,
            is_index=False,
            is_unique=is_primary,
            is_auto_increment=self.is_auto_increment(column),
            comment=column.comment or None,
            options=options,
            is_unsigned="unsigned" in column.column_type.lower(),
            html_type=self.get_html_type(column, options),
            foreign_constraint=foreign_constraint,
            is_foreign_relation=is_foreign_relation,
            is_on_index=not self.is_large_object(column),
        )

    def is_primary_name(self, name: str) -> bool:
        if self.primary_key_match == PrimaryKeyMatch.NORMALIZED:
            return name.strip().lower() == PRIMARY_KEY_NAME
        return name == PRIMARY_KEY_NAME

    def is_auto_increment(self, column: ColumnMetadata) -> bool:
        """Apply the effective auto-increment policy to a column."""
        match self.auto_increment_policy:
            case AutoIncrementPolicy.DEFAULT_PREFIX:
                marker = self.dialect.auto_increment_marker
                return bool(marker) and (column.default or "").startswith(marker)
            case AutoIncrementPolicy.EXTRA_FLAG:
                return "AUTO_INCREMENT" in column.extra.upper()
            case _:
                return self.is_primary_name(column.name)

    def is_large_object(self, column: ColumnMetadata) -> bool:
        length = column.character_maximum_length or 0
        return length > self.config.large_object_length or column.data_type in self.config.large_object_types

    def get_labels(self, name: str) -> Labels:
        """Title-case the column name, once per configured language."""
        title = name.replace("_", " ").title()
        if not self.languages:
            return title
        return dict.fromkeys(self.languages, title)

    def get_options(self, column: ColumnMetadata) -> Options:
        """Get the choice set for boolean and enum columns."""
        if self.dialect.is_boolean(column):
            return self._localize_options(dict(self.config.boolean_options))

        values = parse_enum_options(column.column_type)
        if values is not None:
            return self._localize_options({value: value for value in values})

        return {}

    def get_html_type(self, column: ColumnMetadata, options: Options) -> str:
        if self.dialect.is_boolean(column):
            return "checkbox"
        if options:
            return "select"
        return self.config.html_type_map.get(column.data_type, "text")

    def _localize_options(self, options: dict[str, str]) -> Options:
        if not self.languages:
            return options
        return {language: dict(options) for language in self.languages}


def locale_group(table_name: str) -> str:
    """Translation group for a table's labels: its lower-cased English plural.

    Names already ending in 's' are kept. A trailing consonant + 'y' becomes
    'ies', so 'category' maps to 'categories'.
    """
    name = table_name.lower()
    if name.endswith("s"):
        return name
    if name.endswith("y") and len(name) > 1 and name[-2] not in "aeiou":
        return name[:-1] + "ies"
    return name + "s"


def parse_enum_options(column_type: str) -> list[str] | None:
    """Extract the literals from an ``enum('a','b',...)`` type string.

    Returns:
        The unquoted values in declaration order, or None if the type is not an enum
    """
    match = _ENUM_PATTERN.search(column_type.strip())
    if not match:
        return None

    body = match.group(1)
    literals = _ENUM_LITERAL_PATTERN.findall(body)
    if literals:
        return [literal.replace("''", "'") for literal in literals]
    return [option.strip().strip("'") for option in body.split(",") if option.strip()]
