# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

"""Catalog table models: table listings and table schemas."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional

from ..common.constants import TABLE_TYPE_TABLE, TABLE_TYPE_VIEW
from ._decode import drop_none, ensure_object, read_bool, read_model_list, read_str, read_str_list

if TYPE_CHECKING:
    import pandas as pd


class TableType(str, Enum):
    """Kind of catalog entry."""

    TABLE = TABLE_TYPE_TABLE
    VIEW = TABLE_TYPE_VIEW


def _table_type(value: str) -> Any:
    try:
        return TableType(value)
    except ValueError:
        return value


def _wire(value: Any) -> str:
    return str(getattr(value, "value", value))


@dataclass
class TableMetadata:
    """Name and type of one catalog entry."""

    name: str
    type: Any

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TableMetadata":
        name = "TableMetadata"
        data = ensure_object(data, name)
        return cls(
            name=read_str(data, "name", name, required=True),
            type=_table_type(read_str(data, "type", name, required=True)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "type": _wire(self.type)}


@dataclass
class ColumnInformation:
    """
    Schema of a single column.

    :param name: Column name.
    :type name: str
    :param type: Column data type as reported by the catalog, for example ``string`` or ``integer``.
    :type type: str
    :param nullable: Whether the column accepts nulls, when reported.
    :type nullable: bool | None
    """

    name: str
    type: str
    nullable: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ColumnInformation":
        name = "ColumnInformation"
        data = ensure_object(data, name)
        return cls(
            name=read_str(data, "name", name, required=True),
            type=read_str(data, "type", name, required=True),
            nullable=read_bool(data, "nullable", name),
        )

    def to_dict(self) -> Dict[str, Any]:
        return drop_none({"name": self.name, "type": self.type, "nullable": self.nullable})


@dataclass
class TableList:
    """
    Result of listing catalog tables.

    ``tables`` holds the bare names; ``tables_metadata`` holds name and type
    for the same entries. Iterating yields :class:`TableMetadata`.

    Example::

        for meta in client.list_tables(ListTablesOptions(name_pattern="cust*")):
            print(meta.name, meta.type)
    """

    tables: List[str] = field(default_factory=list)
    tables_metadata: List[TableMetadata] = field(default_factory=list)

    def __iter__(self) -> Iterator[TableMetadata]:
        return iter(self.tables_metadata)

    def __len__(self) -> int:
        return len(self.tables_metadata)

    def __getitem__(self, index: int) -> TableMetadata:
        return self.tables_metadata[index]

    def get(self, table_name: str) -> Optional[TableMetadata]:
        """Return the metadata entry named ``table_name``, or None."""
        for meta in self.tables_metadata:
            if meta.name == table_name:
                return meta
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TableList":
        name = "TableList"
        data = ensure_object(data, name)
        return cls(
            tables=read_str_list(data, "tables", name, required=True),
            tables_metadata=read_model_list(data, "tables_metadata", name, TableMetadata.from_dict, required=True),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tables": list(self.tables),
            "tables_metadata": [meta.to_dict() for meta in self.tables_metadata],
        }

    def to_dataframe(self) -> "pd.DataFrame":
        """Return one row per table with ``name`` and ``type`` columns (requires ``pandas``)."""
        from ..utils._pandas import models_to_dataframe

        return models_to_dataframe(self.tables_metadata, columns=["name", "type"])


@dataclass
class TableInformation:
    """Schema of one catalog table: its name, type and columns."""

    name: str
    type: Any
    columns: List[ColumnInformation] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TableInformation":
        name = "TableInformation"
        data = ensure_object(data, name)
        return cls(
            name=read_str(data, "name", name, required=True),
            type=_table_type(read_str(data, "type", name, required=True)),
            columns=read_model_list(data, "columns", name, ColumnInformation.from_dict, required=True),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": _wire(self.type),
            "columns": [column.to_dict() for column in self.columns],
        }

    def column(self, column_name: str) -> Optional[ColumnInformation]:
        for col in self.columns:
            if col.name == column_name:
                return col
        return None

    def to_dataframe(self) -> "pd.DataFrame":
        """Return the column schema as a DataFrame (``name``, ``type``, ``nullable``)."""
        from ..utils._pandas import models_to_dataframe

        return models_to_dataframe(self.columns, columns=["name", "type", "nullable"])


__all__ = ["TableType", "TableMetadata", "ColumnInformation", "TableList", "TableInformation"]
