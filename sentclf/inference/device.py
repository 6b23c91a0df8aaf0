from __future__ import annotations
import torch

from sentclf.errors import ConfigError, ModelLoadError


def probe_device(policy: str = "auto") -> torch.device:
    """Pick the compute device once per run: ``auto`` prefers CUDA and falls back to CPU."""
    policy = (policy or "auto").lower()
    if policy == "cpu":
        return torch.device("cpu")
    if policy == "cuda":
        if not torch.cuda.is_available():
            raise ModelLoadError("device 'cuda' requested but no CUDA device is available")
        return torch.device("cuda")
    if policy == "auto":
        return torch.device("cuda" if torch.cuda.is_available() else "cpu")
    raise ConfigError(f"unknown device policy: {policy!r}")
