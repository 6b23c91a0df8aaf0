from __future__ import annotations
from pathlib import Path
from typing import Sequence

from sentclf.config import TokenizerConfig
from sentclf.errors import FormatError, SentClfError, TokenizationError
from sentclf.tokenization.assembler import Encoding, assemble
from sentclf.tokenization.normalizer import Normalizer
from sentclf.tokenization.vocab import Vocabulary
from sentclf.tokenization.wordpiece import WordPiece


class Tokenizer:
    """Text -> Encoding pipeline: normalize, WordPiece-segment, assemble.

    Built once from an immutable ``TokenizerConfig``; holds no mutable state, so one
    instance can serve every sentence of a run.
    """

    def __init__(self, vocab: Vocabulary, config: TokenizerConfig | None = None):
        self.config = (config or TokenizerConfig()).validate()
        missing = [t for t in self.config.special_tokens if t not in vocab]
        if missing:
            raise FormatError(f"special tokens not in vocabulary: {', '.join(missing)}")
        self.vocab = vocab
        self.normalizer = Normalizer(self.config.normalizer, self.config.pre_tokenizer)
        self.wordpiece = WordPiece.from_config(vocab, self.config.wordpiece)

    @classmethod
    def from_file(cls, vocab_path: str | Path, config: TokenizerConfig | None = None) -> "Tokenizer":
        config = config or TokenizerConfig()
        return cls(Vocabulary.load(vocab_path, required=config.special_tokens), config)

    def tokenize(self, text: str) -> list[str]:
        return self.wordpiece.tokenize(self.normalizer.normalize(text))

    def encode(self, text: str) -> Encoding:
        if not isinstance(text, str):
            raise TokenizationError(f"expected a string, got {type(text).__name__}")
        cfg = self.config
        try:
            return assemble(
                self.tokenize(text), self.vocab,
                max_length=cfg.truncation.max_length,
                pad_enabled=cfg.padding.enabled,
                truncate_enabled=cfg.truncation.enabled,
                pad_to=cfg.padding.max_length,
                cls_token=cfg.post_processor.cls_token,
                sep_token=cfg.post_processor.sep_token,
                pad_token=cfg.padding.pad_token,
                unk_token=cfg.wordpiece.unk_token,
            )
        except SentClfError:
            raise
        except Exception as e:
            raise TokenizationError(f"failed to encode {text[:50]!r}: {e}") from e

    def decode_words(self, ids: Sequence[int], skip_special_tokens: bool = True) -> list[str]:
        cfg = self.config
        skipped = {cfg.post_processor.cls_token, cfg.post_processor.sep_token, cfg.padding.pad_token}
        prefix = cfg.wordpiece.continuing_subword_prefix
        words: list[str] = []
        for idx in ids:
            tok = self.vocab.token_of(int(idx))
            if tok is None:
                raise TokenizationError(f"id {idx} is not in the vocabulary")
            if skip_special_tokens and tok in skipped:
                continue
            if tok.startswith(prefix) and words:
                words[-1] += tok[len(prefix):]
            else:
                words.append(tok[len(prefix):] if tok.startswith(prefix) else tok)
        return words

    def decode(self, ids: Sequence[int], skip_special_tokens: bool = True) -> str:
        return " ".join(self.decode_words(ids, skip_special_tokens=skip_special_tokens))
