# =============================================================================
# alterations/frames.py - DataFrame Adapter
# =============================================================================
# Runs an AlterationEngine over the rows of a pandas DataFrame.
#
# Usage:
#   df = pd.DataFrame({"id": [1, 2], "price": ["9.5", None]})
#   altered = alter_dataframe(engine, df, {"price": "float"})
# =============================================================================

from __future__ import annotations

import math
from typing import Any

import numpy as np
import pandas as pd

from alterations.engine import AlterationEngine
from alterations.types import AltersMap


def _clean_for_alter(obj: Any) -> Any:
    """
    Convert pandas / numpy missing values to None and numpy scalars to
    Python scalars, recursively.
    """
    if obj is None or obj is pd.NaT:
        return None
    if isinstance(obj, np.generic):
        obj = obj.item()
    if isinstance(obj, float):
        if math.isnan(obj) or math.isinf(obj):
            return None
        return obj
    if isinstance(obj, dict):
        return {k: _clean_for_alter(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_clean_for_alter(item) for item in obj]
    return obj


def dataframe_to_documents(df: pd.DataFrame) -> list[dict[str, Any]]:
    """DataFrame rows as plain dicts, missing values as None."""
    return [_clean_for_alter(row) for row in df.to_dict("records")]


def alter_dataframe(
    engine: AlterationEngine,
    df: pd.DataFrame,
    alters: AltersMap | None = None,
) -> pd.DataFrame:
    """
    Alter every row of a DataFrame.

    The input frame is left untouched. Columns keep their original order;
    columns created by the alters (url, value, map) are appended. The index
    is preserved.

    Args:
        engine: Engine applying the alters
        df: Input DataFrame
        alters: Alters map; defaults to the engine's own

    Returns:
        A new DataFrame built from the altered rows
    """
    documents = engine.alter(dataframe_to_documents(df), alters)

    if not documents:
        return df.copy()

    altered = pd.DataFrame(documents)
    altered.index = df.index

    ordered = [c for c in df.columns if c in altered.columns]
    extra = [c for c in altered.columns if c not in df.columns]
    return altered[ordered + extra]
