"""Generator configuration and YAML config file handling."""

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from fieldgen.policies import AutoIncrementPolicy, PrecisionFallback, PrimaryKeyMatch

CONFIG_ENV_VAR = "FIELDGEN_CONFIG"

# Native type name -> ORM schema builder method
DEFAULT_DATA_TYPE_MAP: dict[str, str] = {
    "bigint": "bigInteger",
    "biginteger": "bigInteger",
    "binary": "binary",
    "blob": "binary",
    "bool": "boolean",
    "boolean": "boolean",
    "bytea": "binary",
    "char": "char",
    "character": "char",
    "character varying": "string",
    "date": "date",
    "datetime": "dateTime",
    "datetimetz": "dateTimeTz",
    "decimal": "decimal",
    "double": "double",
    "double precision": "double",
    "enum": "enum",
    "float": "float",
    "inet": "ipAddress",
    "int": "integer",
    "integer": "integer",
    "ipaddress": "ipAddress",
    "json": "json",
    "jsonb": "jsonb",
    "list": "enum",
    "longblob": "binary",
    "longtext": "longText",
    "macaddr": "macAddress",
    "macaddress": "macAddress",
    "mediumblob": "binary",
    "mediumint": "mediumInteger",
    "mediuminteger": "mediumInteger",
    "mediumtext": "mediumText",
    "nchar": "char",
    "numeric": "decimal",
    "nvarchar": "string",
    "real": "float",
    "smallint": "smallInteger",
    "smallinteger": "smallInteger",
    "string": "string",
    "text": "text",
    "time": "time",
    "time without time zone": "time",
    "time with time zone": "timeTz",
    "timestamp": "timestamp",
    "timestamp without time zone": "timestamp",
    "timestamp with time zone": "timestampTz",
    "timestamptz": "timestampTz",
    "timetz": "timeTz",
    "tinyblob": "binary",
    "tinyint": "tinyInteger",
    "tinyinteger": "tinyInteger",
    "tinytext": "text",
    "uuid": "uuid",
    "varbinary": "binary",
    "varchar": "string",
    "year": "year",
}

# Native type name -> HTML input type
DEFAULT_HTML_TYPE_MAP: dict[str, str] = {
    "bigint": "number",
    "bool": "checkbox",
    "boolean": "checkbox",
    "date": "date",
    "datetime": "datetime",
    "decimal": "number",
    "double": "number",
    "double precision": "number",
    "enum": "select",
    "float": "number",
    "int": "number",
    "integer": "number",
    "longtext": "textarea",
    "mediumint": "number",
    "mediumtext": "textarea",
    "numeric": "number",
    "real": "number",
    "smallint": "number",
    "text": "textarea",
    "time": "time",
    "timestamp": "datetime",
    "timestamp with time zone": "datetime",
    "timestamp without time zone": "datetime",
    "tinyint": "number",
    "tinytext": "textarea",
}

DEFAULT_LARGE_OBJECT_TYPES: list[str] = [
    "varbinary",
    "blob",
    "tinyblob",
    "mediumblob",
    "longblob",
    "text",
    "tinytext",
    "mediumtext",
    "longtext",
    "bytea",
]


class GeneratorConfig(BaseModel):
    """Configuration consumed by the field assembler"""

    version: str = Field(default="1.0", description="Config file version")
    connections: dict[str, str] = Field(default_factory=dict, description="Named connection strings")
    data_type_map: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_DATA_TYPE_MAP), description="Native type to ORM method"
    )
    html_type_map: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_HTML_TYPE_MAP), description="Native type to HTML input type"
    )
    ignore_foreign_constraint: dict[str, list[str]] = Field(
        default_factory=dict, description="Per-table columns excluded from foreign key resolution"
    )
    languages: list[str] = Field(default_factory=list, description="Locale keys for labels and options")
    boolean_options: dict[str, str] = Field(
        default_factory=lambda: {"0": "No", "1": "Yes"}, description="Labels for boolean choices"
    )
    large_object_length: int = Field(default=255, ge=0, description="Lengths above this are not indexed")
    large_object_types: list[str] = Field(
        default_factory=lambda: list(DEFAULT_LARGE_OBJECT_TYPES), description="Types never indexed"
    )
    auto_increment_policy: AutoIncrementPolicy | None = Field(
        default=None, description="Override the dialect's auto-increment detection"
    )
    precision_fallback: PrecisionFallback | None = Field(
        default=None, description="Override the dialect's decimal precision fallback"
    )
    primary_key_match: PrimaryKeyMatch | None = Field(
        default=None, description="Override how the 'id' column name is matched"
    )

    def is_foreign_constraint_ignored(self, table_name: str, column_name: str) -> bool:
        """Check whether a column is excluded from foreign key resolution."""
        return column_name in self.ignore_foreign_constraint.get(table_name, [])


def get_config_path() -> Path:
    """Get the config file path, honouring the FIELDGEN_CONFIG environment variable"""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return Path.home() / ".fieldgen.yaml"


def load_config(path: Path | None = None) -> GeneratorConfig:
    """Load the generator config from YAML.

    Args:
        path: Config file path (default: get_config_path())

    Returns:
        GeneratorConfig, or the defaults if the file does not exist

    Raises:
        ValueError: If the file is not valid YAML or fails validation
    """
    config_path = path or get_config_path()
    if not config_path.exists():
        return GeneratorConfig()

    try:
        with config_path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")

    try:
        return GeneratorConfig.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid config file {config_path}: {e}") from e


def save_config(config: GeneratorConfig, path: Path | None = None) -> Path:
    """Write the config to YAML and return the path written"""
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="json", exclude_none=True)
    with config_path.open("w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, allow_unicode=True, sort_keys=False)
    return config_path


def init_config(path: Path | None = None, force: bool = False) -> Path:
    """Create a config file populated with the defaults.

    Raises:
        FileExistsError: If the file exists and force is False
    """
    config_path = path or get_config_path()
    if config_path.exists() and not force:
        raise FileExistsError(f"Config file already exists: {config_path}")
    return save_config(GeneratorConfig(), config_path)


def resolve_connection(name_or_url: str, config: GeneratorConfig) -> str:
    """Resolve a named connection from the config, or return the argument unchanged"""
    return config.connections.get(name_or_url, name_or_url)
