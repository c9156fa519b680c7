"""Tabular export of collected samples."""

import logging
from pathlib import Path
from typing import Iterable, Union

import pandas as pd

from .models import MetricFamilySamples

logger = logging.getLogger(__name__)

COLUMNS = ["family", "type", "sample_name", "labels", "value"]


def samples_to_dataframe(families: Iterable[MetricFamilySamples]) -> pd.DataFrame:
    """Flatten metric families into one row per sample."""
    rows = []
    for family in families:
        for sample in family.samples:
            rows.append({
                "family": family.name,
                "type": family.type.value,
                "sample_name": sample.name,
                "labels": sample.labels,
                "value": sample.value,
            })

    if not rows:
        return pd.DataFrame(columns=COLUMNS)
    return pd.DataFrame(rows, columns=COLUMNS)


def write_samples_csv(families: Iterable[MetricFamilySamples], path: Union[str, Path]) -> Path:
    """Write collected samples to CSV, one label column per label name."""
    df = samples_to_dataframe(families)
    if not df.empty:
        labels_df = pd.json_normalize(df["labels"].tolist())
        df = pd.concat([df.drop(columns=["labels"]), labels_df], axis=1)

    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(output_path, index=False)
    logger.info(f"Wrote {len(df)} samples to {output_path}")
    return output_path
