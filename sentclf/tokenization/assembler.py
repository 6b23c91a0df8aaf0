from __future__ import annotations
from dataclasses import dataclass

from sentclf.errors import TokenizationError
from sentclf.tokenization.vocab import Vocabulary


@dataclass(frozen=True)
class Encoding:
    ids: tuple[int, ...]
    attention_mask: tuple[int, ...]
    tokens: tuple[str, ...]
    special_tokens_mask: tuple[int, ...]

    def __len__(self) -> int:
        return len(self.ids)

    def to_dict(self) -> dict:
        return {"tokens": list(self.tokens), "input_ids": list(self.ids), "attention_mask": list(self.attention_mask)}


def assemble(subword_tokens: list[str], vocab: Vocabulary, max_length: int, pad_enabled: bool = True,
             truncate_enabled: bool = True, pad_to: int | None = None, cls_token: str = "[CLS]",
             sep_token: str = "[SEP]", pad_token: str = "[PAD]", unk_token: str = "[UNK]") -> Encoding:
    """Wrap subword tokens as ``[CLS] ... [SEP]``, truncate, map to ids and pad.

    Truncation drops trailing content tokens so that ``[SEP]`` stays last and the
    total length is ``max_length``. Padding appends ``pad_token`` (mask 0) up to
    ``pad_to``, which defaults to ``max_length`` and must equal it when truncation
    is also enabled.
    """
    if truncate_enabled and max_length < 2:
        raise TokenizationError(f"max_length={max_length} leaves no room for {cls_token} and {sep_token}")
    if pad_enabled and truncate_enabled and pad_to is not None and pad_to != max_length:
        raise TokenizationError(f"pad_to={pad_to} differs from truncation max_length={max_length}")
    content = list(subword_tokens)
    if truncate_enabled and len(content) + 2 > max_length:
        content = content[:max_length - 2]
    tokens = [cls_token, *content, sep_token]

    unk_id = vocab.id_of(unk_token)
    if unk_id is None:
        raise TokenizationError(f"{unk_token} is not in the vocabulary")
    ids = []
    for tok in tokens:
        idx = vocab.id_of(tok)
        ids.append(unk_id if idx is None else idx)
    mask = [1] * len(ids)
    special = [0] * len(ids); special[0] = 1; special[-1] = 1

    target = max_length if pad_to is None else pad_to
    if pad_enabled and len(ids) < target:
        pad_id = vocab.id_of(pad_token)
        if pad_id is None:
            raise TokenizationError(f"{pad_token} is not in the vocabulary")
        n = target - len(ids)
        ids += [pad_id] * n; mask += [0] * n; special += [1] * n; tokens += [pad_token] * n

    if not (len(ids) == len(mask) == len(tokens) == len(special)):
        raise TokenizationError("encoded sequences have inconsistent lengths")
    return Encoding(tuple(ids), tuple(mask), tuple(tokens), tuple(special))
