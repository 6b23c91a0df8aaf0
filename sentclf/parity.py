from __future__ import annotations
from typing import Iterable

from sentclf.tokenization.pipeline import Tokenizer


def reference_tokenizer(tokenizer: Tokenizer):
    """HuggingFace fast BERT tokenizer assembled block by block from the same vocabulary and options."""
    from tokenizers import Tokenizer as HFTokenizer, normalizers, pre_tokenizers, processors, decoders
    from tokenizers.models import WordPiece
    from transformers import PreTrainedTokenizerFast

    cfg = tokenizer.config; vocab = tokenizer.vocab
    cls_tok, sep_tok = cfg.post_processor.cls_token, cfg.post_processor.sep_token
    hf = HFTokenizer(WordPiece(vocab.as_dict(), unk_token=cfg.wordpiece.unk_token,
                               continuing_subword_prefix=cfg.wordpiece.continuing_subword_prefix,
                               max_input_chars_per_word=cfg.wordpiece.max_input_chars_per_word))
    hf.normalizer = normalizers.BertNormalizer(clean_text=cfg.normalizer.clean_text,
                                               handle_chinese_chars=cfg.normalizer.handle_chinese_chars,
                                               strip_accents=cfg.normalizer.strip_accents,
                                               lowercase=cfg.normalizer.lowercase)
    hf.pre_tokenizer = pre_tokenizers.BertPreTokenizer() if cfg.pre_tokenizer.split_punctuation else pre_tokenizers.WhitespaceSplit()
    hf.post_processor = processors.BertProcessing((sep_tok, vocab.id_of(sep_tok)), (cls_tok, vocab.id_of(cls_tok)))
    hf.decoder = decoders.WordPiece(prefix=cfg.wordpiece.continuing_subword_prefix)
    return PreTrainedTokenizerFast(tokenizer_object=hf, unk_token=cfg.wordpiece.unk_token, sep_token=sep_tok,
                                   cls_token=cls_tok, pad_token=cfg.padding.pad_token)


def check_parity(tokenizer: Tokenizer, sentences: Iterable[str], max_examples: int = 20) -> dict:
    """Encode every sentence with both tokenizers and report where ids or masks differ."""
    ref = reference_tokenizer(tokenizer)
    cfg = tokenizer.config
    kwargs = dict(truncation=cfg.truncation.enabled, padding="max_length" if cfg.padding.enabled else False)
    if cfg.truncation.enabled: kwargs["max_length"] = cfg.truncation.max_length
    elif cfg.padding.enabled: kwargs["max_length"] = cfg.padding.max_length

    n, mismatches, examples = 0, 0, []
    for i, sentence in enumerate(sentences):
        n += 1
        ours = tokenizer.encode(sentence)
        theirs = ref(sentence, **kwargs)
        if list(ours.ids) != list(theirs["input_ids"]) or list(ours.attention_mask) != list(theirs["attention_mask"]):
            mismatches += 1
            if len(examples) < max_examples:
                examples.append({"row": i, "sentence": sentence, "ours": list(ours.tokens),
                                 "reference": ref.convert_ids_to_tokens(theirs["input_ids"])})
    return {"n": n, "mismatches": mismatches, "match_rate": 1.0 if n == 0 else (n - mismatches) / n, "examples": examples}
