from __future__ import annotations
from pathlib import Path
import json, time

ROOT = Path(__file__).resolve().parents[1]
DEFAULT_CFG = ROOT / "conf" / "default.yaml"

def make_run_id(prefix: str = "run") -> str:
    return f"{prefix}_{int(time.time())}"

def save_json(obj, path: Path):
    path = Path(path); path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(obj, f, ensure_ascii=False, indent=2)

def read_lines(path: Path) -> list[str]:
    with open(path, "r", encoding="utf-8") as f:
        return [line.rstrip("\r\n") for line in f]
