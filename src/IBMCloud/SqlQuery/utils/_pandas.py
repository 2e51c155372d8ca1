# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

"""Internal pandas helpers"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence

import pandas as pd


def _cell(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


def model_to_row(model: Any, columns: Sequence[str]) -> Dict[str, Any]:
    """Read ``columns`` off a model instance into a plain dict, unwrapping enums."""
    return {name: _cell(getattr(model, name, None)) for name in columns}


def models_to_dataframe(
    models: Iterable[Any],
    columns: Sequence[str],
    timestamp_columns: Optional[Sequence[str]] = None,
) -> pd.DataFrame:
    """Build a DataFrame with one row per model and a fixed column order.

    :param models: Model instances (dataclasses from :mod:`IBMCloud.SqlQuery.models`).
    :param columns: Attribute names to export, in column order.
    :param timestamp_columns: Columns holding ``datetime`` values; converted to
        ``pandas.Timestamp`` (missing values become ``NaT``).
    """
    rows: List[Dict[str, Any]] = [model_to_row(m, columns) for m in models]
    df = pd.DataFrame(rows, columns=list(columns))
    for name in timestamp_columns or ():
        df[name] = pd.to_datetime(df[name], utc=True)
    return df
