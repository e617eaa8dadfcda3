"""
Result tables and pool dumps.

- StageOutcome lists -> pandas DataFrame / TSV
- Final pools -> compressed .npz
"""

import logging
from pathlib import Path
from typing import Sequence, Union

import numpy as np
import pandas as pd

from .random_access import StageOutcome

logger = logging.getLogger(__name__)

OUTCOME_COLS = [
    "stage",
    "target_percent",
    "n_desired",
    "n_spurious",
    "mean",
    "threshold",
    "false_negative_count",
    "false_negative_percent",
    "false_positive_count",
    "false_positive_percent",
]


def outcomes_to_frame(outcomes: Sequence[StageOutcome]) -> pd.DataFrame:
    """One row per stage outcome, pools reduced to their sizes."""
    rows = []
    for o in outcomes:
        rows.append({
            "stage": o.stage,
            "target_percent": o.target_percent,
            "n_desired": len(o.desired_pool),
            "n_spurious": len(o.spurious_pool),
            "mean": o.mean,
            "threshold": o.threshold,
            "false_negative_count": o.false_negative_count,
            "false_negative_percent": o.false_negative_percent,
            "false_positive_count": o.false_positive_count,
            "false_positive_percent": o.false_positive_percent,
        })
    return pd.DataFrame(rows, columns=OUTCOME_COLS)


def write_outcomes(
    outcomes: Sequence[StageOutcome],
    filepath: Union[str, Path],
) -> pd.DataFrame:
    """
    Write stage outcomes as TSV.

    Args:
        outcomes: Stage outcomes
        filepath: Output file path

    Returns:
        The written DataFrame
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    df = outcomes_to_frame(outcomes)
    df.to_csv(filepath, sep="\t", index=False)
    logger.info(f"Saved {len(df)} stage outcomes to {filepath.name}")
    return df


def save_pools(outcomes: Sequence[StageOutcome], filepath: Union[str, Path]) -> None:
    """Store desired/spurious pools of every stage as stage<k>_desired / stage<k>_spurious."""
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    arrays = {}
    for o in outcomes:
        arrays[f"stage{o.stage}_desired"] = np.asarray(o.desired_pool)
        arrays[f"stage{o.stage}_spurious"] = np.asarray(o.spurious_pool)
    np.savez_compressed(filepath, **arrays)
    logger.info(f"Saved pools of {len(outcomes)} stages to {filepath.name}")


def load_pools(filepath: Union[str, Path]) -> dict:
    with np.load(filepath) as data:
        return {key: data[key] for key in data.files}
