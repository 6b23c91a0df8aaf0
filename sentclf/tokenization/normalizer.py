"""BERT-style text normalization and pre-tokenization.

``Normalizer.normalize`` turns raw text into word-level tokens:

1. clean: drop NUL, U+FFFD and control characters, map whitespace to " "
2. pad CJK ideographs with spaces so each one is a word of its own
3. strip accents (NFD, then drop non-spacing marks)
4. lowercase
5. split on whitespace
6. split punctuation off as single-character tokens

Here punctuation is anything that is not a letter, a digit, whitespace or a
combining mark. Output is stable: normalizing ``" ".join(tokens)`` gives
``tokens`` back.
"""
from __future__ import annotations
import unicodedata

from sentclf.config import NormalizerConfig, PreTokenizerConfig

_CJK_RANGES = (
    (0x4E00, 0x9FFF), (0x3400, 0x4DBF), (0x20000, 0x2A6DF), (0x2A700, 0x2B73F),
    (0x2B740, 0x2B81F), (0x2B820, 0x2CEAF), (0xF900, 0xFAFF), (0x2F800, 0x2FA1F),
)


def is_whitespace(ch: str) -> bool:
    if ch in (" ", "\t", "\n", "\r"):
        return True
    return unicodedata.category(ch) == "Zs"


def is_control(ch: str) -> bool:
    if ch in ("\t", "\n", "\r"):
        return False
    return unicodedata.category(ch).startswith("C")


def is_cjk(ch: str) -> bool:
    cp = ord(ch)
    return any(lo <= cp <= hi for lo, hi in _CJK_RANGES)


def is_punctuation(ch: str) -> bool:
    if ch.isalnum() or ch.isspace():
        return False
    return not unicodedata.category(ch).startswith("M")


def clean_text(text: str) -> str:
    out = []
    for ch in text:
        if ch in ("\x00", "\ufffd") or is_control(ch):
            continue
        out.append(" " if is_whitespace(ch) else ch)
    return "".join(out)


def pad_cjk(text: str) -> str:
    return "".join(f" {ch} " if is_cjk(ch) else ch for ch in text)


def strip_accents(text: str) -> str:
    return "".join(ch for ch in unicodedata.normalize("NFD", text) if unicodedata.category(ch) != "Mn")


def split_punctuation(word: str) -> list[str]:
    pieces, current = [], []
    for ch in word:
        if is_punctuation(ch):
            if current: pieces.append("".join(current)); current = []
            pieces.append(ch)
        else:
            current.append(ch)
    if current: pieces.append("".join(current))
    return pieces


class Normalizer:
    def __init__(self, config: NormalizerConfig | None = None, pre_tokenizer: PreTokenizerConfig | None = None):
        self.config = config or NormalizerConfig()
        self.pre_tokenizer = pre_tokenizer or PreTokenizerConfig()

    def normalize_text(self, text: str) -> str:
        cfg = self.config
        if cfg.clean_text: text = clean_text(text)
        if cfg.handle_chinese_chars: text = pad_cjk(text)
        if cfg.strip_accents: text = strip_accents(text)
        if cfg.lowercase:
            text = text.lower()
            # lowercasing can decompose into combining marks, e.g. U+0130
            if cfg.strip_accents: text = strip_accents(text)
        return text

    def normalize(self, text: str) -> list[str]:
        words = self.normalize_text(text).split()
        if not self.pre_tokenizer.split_punctuation:
            return words
        return [piece for word in words for piece in split_punctuation(word)]
