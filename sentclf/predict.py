from __future__ import annotations
from pathlib import Path
from typing import Iterable, Protocol, Sequence
import time
import numpy as np
from tqdm import tqdm

from sentclf.config import AppConfig
from sentclf.errors import SentClfError, TokenizationError
from sentclf.inference.device import probe_device
from sentclf.inference.invoker import ModelInvoker
from sentclf.logger import RunLogger
from sentclf.table_io import read_table, write_table
from sentclf.tokenization.pipeline import Tokenizer


class Predictor(Protocol):
    def predict(self, ids: Sequence[int], mask: Sequence[int]) -> int: ...


def run_batch(sentences: Iterable[str], tokenizer: Tokenizer, invoker: Predictor, progress: bool = True) -> list[int]:
    """Encode and classify sentences in order; the first failing row aborts the batch.

    Errors are re-raised with the row index and logged once by the caller.
    """
    labels = []
    for i, sentence in enumerate(tqdm(sentences, desc="predict", unit="sent", disable=not progress)):
        try:
            enc = tokenizer.encode(sentence)
        except SentClfError as e:
            raise type(e)(f"row {i}: {e}") from e
        except Exception as e:
            raise TokenizationError(f"row {i}: {e}") from e
        try:
            labels.append(invoker.predict(enc.ids, enc.attention_mask))
        except SentClfError as e:
            raise type(e)(f"row {i}: {e}") from e
    return labels


def run_prediction(model_path: str | Path, vocab_path: str | Path, input_path: str | Path,
                   output_path: str | Path, cfg: AppConfig, logger: RunLogger, progress: bool = True) -> Path:
    t0 = time.time()
    tokenizer = Tokenizer.from_file(vocab_path, cfg.tokenizer)
    logger.info("Loaded vocabulary %s (%d tokens)", vocab_path, len(tokenizer.vocab))

    device = probe_device(cfg.model.device)
    invoker = ModelInvoker.load(model_path, device)
    logger.info("Loaded model %s on %s", model_path, device)

    df = read_table(input_path, text_col=cfg.data.text_col, sep=cfg.data.sep)
    logger.info("Read %d sentences from %s", len(df), input_path)

    labels = run_batch(df[cfg.data.text_col].tolist(), tokenizer, invoker, progress=progress)
    out = df.copy(); out[cfg.data.label_col] = np.asarray(labels, dtype=np.int64)
    path = write_table(out, output_path, sep=cfg.data.sep)

    counts = {int(k): int(v) for k, v in zip(*np.unique(out[cfg.data.label_col].to_numpy(), return_counts=True))}
    logger.info("Saved %d labels to %s", len(labels), path)
    logger.event("predict", n=len(labels), device=str(device), label_counts=counts,
                 seconds=round(time.time() - t0, 3), output=str(path))
    return path
