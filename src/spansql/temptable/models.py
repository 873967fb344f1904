"""Pydantic descriptors for temporary tables."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from spansql.types import SqlTypes


class TemporaryTableColumn(BaseModel):
    """A column of a temporary table."""

    model_config = ConfigDict(frozen=True)

    name: str
    type_code: SqlTypes
    nullable: bool = True
    primary_key: bool = False
    sql_type_definition: str | None = Field(
        None, description="Explicit column type, overriding the dialect's type name"
    )


class TemporaryTable(BaseModel):
    """A temporary table: name, optional schema/catalog and ordered columns."""

    model_config = ConfigDict(frozen=True)

    name: str
    schema_name: str | None = None
    catalog: str | None = None
    columns: list[TemporaryTableColumn] = Field(default_factory=list)

    @field_validator("columns")
    @classmethod
    def _unique_column_names(cls, v: list[TemporaryTableColumn]) -> list[TemporaryTableColumn]:
        seen: set[str] = set()
        for column in v:
            if column.name in seen:
                raise ValueError(f"Duplicate column name '{column.name}'")
            seen.add(column.name)
        return v

    @property
    def qualified_name(self) -> str:
        return ".".join(p for p in (self.catalog, self.schema_name, self.name) if p)

    @property
    def primary_key_columns(self) -> list[TemporaryTableColumn]:
        return [c for c in self.columns if c.primary_key]
