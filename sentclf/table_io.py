from __future__ import annotations
from pathlib import Path
import csv
import pandas as pd

from sentclf.errors import FileError, FormatError


def read_table(path: str | Path, text_col: str = "sentence", sep: str = "\t") -> pd.DataFrame:
    path = Path(path)
    if not path.is_file(): raise FileError(f"input not found: {path}")
    try:
        df = pd.read_csv(path, sep=sep, header=0, dtype={text_col: str}, keep_default_na=False, encoding="utf-8")
    except pd.errors.EmptyDataError as e:
        raise FormatError(f"{path} is empty, a header row is required") from e
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise FormatError(f"cannot parse {path}: {e}") from e
    except OSError as e:
        raise FileError(f"cannot read {path}: {e}") from e
    if text_col not in df.columns:
        raise FormatError(f"{path} has no '{text_col}' column (columns: {', '.join(map(str, df.columns))})")
    df[text_col] = df[text_col].astype(str)
    return df


def write_table(df: pd.DataFrame, path: str | Path, sep: str = "\t") -> Path:
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(path, sep=sep, index=False, quoting=csv.QUOTE_MINIMAL)
    except OSError as e:
        raise FileError(f"cannot write {path}: {e}") from e
    return path
