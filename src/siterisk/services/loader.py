"""Loading of site permission exports."""

import logging
from pathlib import Path
from typing import Union

import pandas as pd

from siterisk.exceptions import InputError

logger = logging.getLogger(__name__)


def load_rows(path: Union[str, Path]) -> list[dict]:
    """
    Load a CSV export into a list of rows.

    Every cell is read as a string and blank cells stay blank; numeric
    coercion is left to the scoring model.

    Raises:
        InputError: if the file is missing or cannot be parsed
    """
    path = Path(path)
    if not path.is_file():
        raise InputError(f"Input file not found: {path}")

    try:
        df = pd.read_csv(
            path,
            dtype=str,
            keep_default_na=False,
            encoding="utf-8-sig",
            skipinitialspace=True,
        )
    except pd.errors.EmptyDataError:
        logger.warning(f"Input file is empty: {path}")
        return []
    except (pd.errors.ParserError, UnicodeDecodeError, OSError) as e:
        raise InputError(f"Could not read {path}: {e}") from e

    df.columns = [str(c).strip() for c in df.columns]
    logger.info(f"Loaded {len(df)} rows with {len(df.columns)} columns from {path}")
    return df.to_dict(orient="records")
