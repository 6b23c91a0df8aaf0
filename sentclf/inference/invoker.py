from __future__ import annotations
from pathlib import Path
from typing import Mapping, Sequence
import torch

from sentclf.errors import FileError, ModelError, ModelLoadError


class ModelInvoker:
    """Runs a TorchScript sequence classifier on one encoded sentence at a time.

    The scripted module is loaded once onto the probed device and called as
    ``model(input_ids, attention_mask)`` with ``[1, seq_len]`` int64 tensors.
    """

    def __init__(self, model: torch.jit.ScriptModule, device: torch.device):
        self.model = model
        self.device = device

    @classmethod
    def load(cls, path: str | Path, device: torch.device | None = None) -> "ModelInvoker":
        path = Path(path); device = device or torch.device("cpu")
        if not path.is_file():
            raise FileError(f"model not found: {path}")
        try:
            model = torch.jit.load(str(path), map_location=device)
        except (RuntimeError, ValueError) as e:
            raise ModelLoadError(f"cannot load TorchScript model {path}: {e}") from e
        model.eval()
        return cls(model, device)

    def logits(self, ids: Sequence[int], mask: Sequence[int]) -> torch.Tensor:
        if len(ids) != len(mask):
            raise ModelError(f"ids and mask lengths differ: {len(ids)} != {len(mask)}")
        input_ids = torch.tensor(list(ids), dtype=torch.long, device=self.device).unsqueeze(0)
        attention_mask = torch.tensor(list(mask), dtype=torch.long, device=self.device).unsqueeze(0)
        try:
            with torch.inference_mode():
                out = self.model(input_ids, attention_mask)
        except (RuntimeError, IndexError, ValueError) as e:
            raise ModelError(f"forward pass failed: {e}") from e
        if isinstance(out, Mapping): out = out.get("logits")
        elif isinstance(out, (tuple, list)): out = out[0] if out else None
        if not isinstance(out, torch.Tensor):
            raise ModelError(f"model returned {type(out).__name__}, expected a tensor of logits")
        return out

    def predict(self, ids: Sequence[int], mask: Sequence[int]) -> int:
        pred = torch.argmax(self.logits(ids, mask), dim=-1)
        if pred.numel() != 1:
            raise ModelError(f"expected one class index per sentence, got shape {tuple(pred.shape)}")
        return int(pred.item())
