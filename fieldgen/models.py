"""Pydantic models for schema metadata and field descriptors"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# ============================================================================
# Schema Metadata Models
# ============================================================================


class ColumnMetadata(BaseModel):
    """Snapshot of one column as reported by the metadata store"""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Column name")
    default: str | None = Field(default=None, description="Raw column default expression")
    is_nullable: str = Field(default="YES", description="Raw nullability sentinel (e.g. YES/NO)")
    data_type: str = Field(description="Lower-case native data type name")
    character_maximum_length: int | None = Field(default=None, description="Declared character length")
    column_type: str = Field(default="", description="Full raw column type string, e.g. decimal(10,2)")
    comment: str | None = Field(default=None, description="Column comment")
    ordinal_position: int | None = Field(default=None, description="Physical column position")
    extra: str = Field(default="", description="Engine specific extra flags (MySQL EXTRA column)")


class ForeignConstraint(BaseModel):
    """Foreign key declared on a single source column"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    field: str = Field(description="Source column name")
    references: str = Field(description="Referenced table name")
    on: str = Field(description="Referenced column name")
    on_delete: str | None = Field(default=None, alias="on-delete", description="ON DELETE rule")
    on_update: str | None = Field(default=None, alias="on-update", description="ON UPDATE rule")


# ============================================================================
# Field Descriptor Model
# ============================================================================

Labels = str | dict[str, str]
Options = dict[str, Any]


class FieldDescriptor(BaseModel):
    """Normalized description of one column, consumed by the template layer.

    Every attribute is always serialized (including ``None`` and empty values)
    because templates index the dashed keys directly.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(description="Column name")
    labels: Labels = Field(description="Display label, or label per language")
    is_nullable: bool = Field(default=True, alias="is-nullable")
    data_value: str | None = Field(default=None, alias="data-value", description="Raw default value")
    data_type: str = Field(alias="data-type", description="Mapped ORM method name")
    data_type_params: list[int] = Field(default_factory=list, alias="data-type-params")
    is_primary: bool = Field(default=False, alias="is-primary")
    is_index: bool = Field(default=False, alias="is-index")
    is_unique: bool = Field(default=False, alias="is-unique")
    is_auto_increment: bool = Field(default=False, alias="is-auto-increment")
    comment: str | None = Field(default=None)
    options: Options = Field(default_factory=dict, description="Choice set for selects and checkboxes")
    is_unsigned: bool = Field(default=False, alias="is-unsigned")
    html_type: str = Field(default="text", alias="html-type", description="Suggested input widget")
    foreign_constraint: ForeignConstraint | None = Field(default=None, alias="foreign-constraint")
    is_foreign_relation: bool = Field(
        default=True, alias="is-foreign-relation", description="False when excluded from FK resolution"
    )
    is_on_index: bool = Field(default=True, alias="is-on-index", description="False for large object columns")

    def to_template_dict(self) -> dict[str, Any]:
        """Return the dashed-key dictionary expected by the templates.

        With languages configured, ``labels`` and ``options`` are keyed by
        language first. Boolean and enum options alike take the shape
        ``{"en": {"0": "No", "1": "Yes"}}``, never ``{"0": {"en": "No"}}``.
        """
        return self.model_dump(by_alias=True)
