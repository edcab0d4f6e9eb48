"""
File I/O utilities.

Helper functions for reading and writing the pipeline's flat files with
consistent error handling and logging.
"""

from pathlib import Path
import logging
import pandas as pd

logger = logging.getLogger(__name__)


def ensure_dir(path: Path) -> Path:
    """
    Ensure directory exists, creating if necessary.

    Parameters
    ----------
    path : Path
        Directory path to ensure exists.

    Returns
    -------
    Path
        The input path (for chaining).
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def read_delimited(path: Path, sep: str = "\t") -> pd.DataFrame:
    """
    Load a delimited text extract with every column kept as text.

    Only empty cells and whole-cell ``NA`` are read as absent values; other
    markers pandas would normally treat as missing (``None``, ``null``,
    ``N/A``, ...) stay as text. Nothing is coerced to numbers, so
    identifiers keep their leading zeros.

    Parameters
    ----------
    path : Path
        Path to the extract.
    sep : str
        Field separator.

    Returns
    -------
    pd.DataFrame
        Loaded DataFrame with a fresh RangeIndex.

    Raises
    ------
    FileNotFoundError
        If file does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")

    df = pd.read_csv(
        path,
        sep=sep,
        dtype=str,
        keep_default_na=False,
        na_values=["", "NA"],
    )
    logger.info(f"Loaded {len(df):,} rows, {len(df.columns)} columns from {path.name}")
    return df


def write_delimited(
    df: pd.DataFrame,
    path: Path,
    sep: str = "\t",
    na_rep: str = "NA",
) -> Path:
    """
    Write DataFrame as a delimited flat file, replacing any existing file.

    The table is written to a temporary sibling first and moved into place,
    so an interrupted write never leaves a partial artifact at *path*.

    Parameters
    ----------
    df : pd.DataFrame
        DataFrame to save.
    path : Path
        Output path.
    sep : str
        Field separator.
    na_rep : str
        Text written for absent values.

    Returns
    -------
    Path
        The output path.
    """
    path = Path(path)
    ensure_dir(path.parent)
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        df.to_csv(tmp_path, sep=sep, na_rep=na_rep, index=False)
        tmp_path.replace(path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()
    logger.info(f"Saved {len(df):,} rows to {path.name}")
    return path


def save_parquet(
    df: pd.DataFrame,
    path: Path,
    compression: str = "snappy",
) -> Path:
    """
    Save DataFrame to parquet with logging.

    Parameters
    ----------
    df : pd.DataFrame
        DataFrame to save.
    path : Path
        Output path.
    compression : str
        Compression algorithm.

    Returns
    -------
    Path
        The output path.
    """
    ensure_dir(path.parent)
    df.to_parquet(path, compression=compression, index=False)
    logger.info(f"Saved {len(df):,} rows to {path.name}")
    return path

