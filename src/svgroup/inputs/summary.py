from __future__ import annotations

from typing import Mapping, Sequence

import pandas as pd

from svgroup.core_logic.variants import Variant

FRAME_COLS = ["graph_id", "sample", "id", "start", "end", "length"]


def grouping_to_frame(grouping: Mapping[str, Sequence[Variant]]) -> pd.DataFrame:
    """Flatten a grouping into one row per variant.

    Args:
        grouping (Mapping[str, Sequence[Variant]]): graph id -> variants.

    Returns:
        pd.DataFrame: Columns ``graph_id, sample, id, start, end, length``,
        groups in mapping order and variants in group order.
    """
    rows = [
        (graph_id, v.sample, v.id, v.start, v.end, v.length)
        for graph_id, variants in grouping.items()
        for v in variants
    ]
    return pd.DataFrame.from_records(rows, columns=FRAME_COLS)


def group_sizes(grouping: Mapping[str, Sequence[Variant]]) -> pd.Series:
    """Number of variants per graph id."""
    return pd.Series(
        {graph_id: len(variants) for graph_id, variants in grouping.items()},
        name="n_variants",
        dtype="int64",
    )
