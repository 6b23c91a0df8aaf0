from __future__ import annotations
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping

from sentclf.errors import FileError, FormatError
from sentclf.utils import read_lines

DEFAULT_SPECIAL_TOKENS = ("[SEP]", "[CLS]", "[PAD]", "[UNK]")


class Vocabulary:
    """Read-only token <-> id mapping; the id of a token is its line number in the vocab file."""

    def __init__(self, token_to_id: Mapping[str, int], required: Iterable[str] = DEFAULT_SPECIAL_TOKENS):
        missing = [t for t in required if t not in token_to_id]
        if missing:
            raise FormatError(f"vocabulary is missing special tokens: {', '.join(missing)}")
        if any(i < 0 for i in token_to_id.values()):
            raise FormatError("vocabulary ids must be non-negative")
        self._token_to_id = MappingProxyType(dict(token_to_id))
        self._id_to_token = MappingProxyType({i: t for t, i in token_to_id.items()})
        if len(self._id_to_token) != len(self._token_to_id):
            raise FormatError("vocabulary maps several tokens to the same id")

    @classmethod
    def load(cls, path: str | Path, required: Iterable[str] = DEFAULT_SPECIAL_TOKENS) -> "Vocabulary":
        path = Path(path)
        if not path.is_file():
            raise FileError(f"vocabulary not found: {path}")
        try:
            lines = read_lines(path)
        except UnicodeDecodeError as e:
            raise FormatError(f"vocabulary {path} is not valid UTF-8: {e}") from e
        except OSError as e:
            raise FileError(f"cannot read vocabulary {path}: {e}") from e

        tokens = [line.rstrip() for line in lines]
        while tokens and not tokens[-1]: tokens.pop()
        if not tokens:
            raise FormatError(f"vocabulary {path} is empty")
        token_to_id: dict[str, int] = {}
        for i, tok in enumerate(tokens):
            if not tok:
                raise FormatError(f"{path}:{i + 1}: empty token")
            if tok in token_to_id:
                raise FormatError(f"{path}:{i + 1}: duplicate token {tok!r} (first seen on line {token_to_id[tok] + 1})")
            token_to_id[tok] = i
        return cls(token_to_id, required=required)

    def id_of(self, token: str) -> int | None:
        return self._token_to_id.get(token)

    def token_of(self, idx: int) -> str | None:
        return self._id_to_token.get(idx)

    def contains(self, token: str) -> bool:
        return token in self._token_to_id

    __contains__ = contains

    def __len__(self) -> int:
        return len(self._token_to_id)

    def as_dict(self) -> dict[str, int]:
        return dict(self._token_to_id)
