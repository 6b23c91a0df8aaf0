from __future__ import annotations

from sentclf.config import WordPieceConfig
from sentclf.tokenization.vocab import Vocabulary


class WordPiece:
    """Greedy longest-match-first subword segmentation.

    Pieces after the first one in a word carry ``continuing_subword_prefix``.
    A word that cannot be covered completely, or that is longer than
    ``max_input_chars_per_word``, becomes a single ``unk_token``.
    """

    def __init__(self, vocab: Vocabulary, unk_token: str = "[UNK]", continuing_subword_prefix: str = "##",
                 max_input_chars_per_word: int = 100):
        self.vocab = vocab
        self.unk_token = unk_token
        self.prefix = continuing_subword_prefix
        self.max_input_chars_per_word = max_input_chars_per_word

    @classmethod
    def from_config(cls, vocab: Vocabulary, config: WordPieceConfig) -> "WordPiece":
        return cls(vocab, unk_token=config.unk_token, continuing_subword_prefix=config.continuing_subword_prefix,
                   max_input_chars_per_word=config.max_input_chars_per_word)

    def segment(self, word: str) -> list[str]:
        if not word:
            return []
        if len(word) > self.max_input_chars_per_word:
            return [self.unk_token]
        pieces, start = [], 0
        while start < len(word):
            end = len(word); match = None
            while start < end:
                candidate = word[start:end]
                if start > 0: candidate = self.prefix + candidate
                if candidate in self.vocab:
                    match = candidate; break
                end -= 1
            if match is None:
                return [self.unk_token]
            pieces.append(match); start = end
        return pieces

    def tokenize(self, words: list[str]) -> list[str]:
        return [piece for word in words for piece in self.segment(word)]
