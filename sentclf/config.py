"""Immutable run configuration loaded from YAML.

Every section maps to a frozen dataclass; the tokenizer section is consumed
once to build the encoding pipeline and is never changed afterwards. CLI
overrides go through ``dataclasses.replace`` so the loaded values stay intact.
"""
from __future__ import annotations
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any
import yaml

from sentclf.errors import ConfigError, FileError

DEVICE_POLICIES = ("auto", "cpu", "cuda")


@dataclass(frozen=True)
class NormalizerConfig:
    clean_text: bool = True
    handle_chinese_chars: bool = True
    strip_accents: bool = True
    lowercase: bool = True


@dataclass(frozen=True)
class PreTokenizerConfig:
    split_punctuation: bool = True


@dataclass(frozen=True)
class WordPieceConfig:
    unk_token: str = "[UNK]"
    continuing_subword_prefix: str = "##"
    max_input_chars_per_word: int = 100


@dataclass(frozen=True)
class PostProcessorConfig:
    cls_token: str = "[CLS]"
    sep_token: str = "[SEP]"


@dataclass(frozen=True)
class PaddingConfig:
    enabled: bool = False
    max_length: int = 512
    pad_token: str = "[PAD]"


@dataclass(frozen=True)
class TruncationConfig:
    enabled: bool = True
    max_length: int = 512


@dataclass(frozen=True)
class TokenizerConfig:
    normalizer: NormalizerConfig = field(default_factory=NormalizerConfig)
    pre_tokenizer: PreTokenizerConfig = field(default_factory=PreTokenizerConfig)
    wordpiece: WordPieceConfig = field(default_factory=WordPieceConfig)
    post_processor: PostProcessorConfig = field(default_factory=PostProcessorConfig)
    padding: PaddingConfig = field(default_factory=PaddingConfig)
    truncation: TruncationConfig = field(default_factory=TruncationConfig)

    @property
    def special_tokens(self) -> tuple[str, ...]:
        return (self.post_processor.cls_token, self.post_processor.sep_token,
                self.padding.pad_token, self.wordpiece.unk_token)

    def validate(self) -> "TokenizerConfig":
        if self.truncation.enabled and self.truncation.max_length < 2:
            raise ConfigError(f"truncation.max_length must be >= 2, got {self.truncation.max_length}")
        if self.padding.enabled and self.padding.max_length < 2:
            raise ConfigError(f"padding.max_length must be >= 2, got {self.padding.max_length}")
        if self.padding.enabled and self.truncation.enabled and self.padding.max_length != self.truncation.max_length:
            raise ConfigError(f"padding.max_length ({self.padding.max_length}) must equal truncation.max_length "
                              f"({self.truncation.max_length}) when both are enabled")
        if self.wordpiece.max_input_chars_per_word < 1:
            raise ConfigError("wordpiece.max_input_chars_per_word must be positive")
        if not self.wordpiece.continuing_subword_prefix:
            raise ConfigError("wordpiece.continuing_subword_prefix must not be empty")
        if len(set(self.special_tokens)) != len(self.special_tokens):
            raise ConfigError(f"special tokens must be distinct: {self.special_tokens}")
        return self

    def with_length(self, max_length: int | None = None, pad: bool | None = None,
                    truncate: bool | None = None) -> "TokenizerConfig":
        padding, truncation = self.padding, self.truncation
        if max_length is not None:
            padding = replace(padding, max_length=max_length); truncation = replace(truncation, max_length=max_length)
        if pad is not None: padding = replace(padding, enabled=pad)
        if truncate is not None: truncation = replace(truncation, enabled=truncate)
        return replace(self, padding=padding, truncation=truncation).validate()


@dataclass(frozen=True)
class DataConfig:
    text_col: str = "sentence"
    label_col: str = "labels"
    sep: str = "\t"


@dataclass(frozen=True)
class ModelConfig:
    device: str = "auto"


@dataclass(frozen=True)
class LoggingConfig:
    file: str = "log/log.log"
    events_file: str = "log/events.jsonl"
    level: str = "INFO"


@dataclass(frozen=True)
class AppConfig:
    name: str = "sentclf"
    data: DataConfig = field(default_factory=DataConfig)
    tokenizer: TokenizerConfig = field(default_factory=TokenizerConfig)
    model: ModelConfig = field(default_factory=ModelConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self) -> "AppConfig":
        self.tokenizer.validate()
        if self.model.device not in DEVICE_POLICIES:
            raise ConfigError(f"model.device must be one of {DEVICE_POLICIES}, got {self.model.device!r}")
        if self.logging.level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ConfigError(f"unknown logging.level: {self.logging.level!r}")
        if not self.data.sep:
            raise ConfigError("data.sep must not be empty")
        return self


def _build(cls, raw: Any, where: str):
    if raw is None:
        return cls()
    if not isinstance(raw, dict):
        raise ConfigError(f"section '{where or 'config'}' must be a mapping, got {type(raw).__name__}")
    known = {f.name: f for f in fields(cls)}
    unknown = sorted(set(raw) - set(known))
    if unknown:
        raise ConfigError(f"unknown keys in '{where or 'config'}': {', '.join(unknown)}")
    kwargs = {}
    for name, value in raw.items():
        default = getattr(cls(), name); key = f"{where}.{name}" if where else name
        if hasattr(default, "__dataclass_fields__"):
            kwargs[name] = _build(type(default), value, key)
        elif isinstance(default, bool):
            if not isinstance(value, bool):
                raise ConfigError(f"'{key}' must be a boolean, got {value!r}")
            kwargs[name] = value
        elif isinstance(default, int):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"'{key}' must be an integer, got {value!r}")
            kwargs[name] = value
        else:
            if not isinstance(value, str):
                raise ConfigError(f"'{key}' must be a string, got {value!r}")
            kwargs[name] = value
    return cls(**kwargs)


def config_from_dict(raw: dict | None) -> AppConfig:
    return _build(AppConfig, raw or {}, "").validate()


def load_config(path: str | Path | None = None) -> AppConfig:
    if path is None:
        return AppConfig().validate()
    path = Path(path)
    if not path.exists():
        raise FileError(f"config not found: {path}")
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise FileError(f"cannot read config {path}: {e}") from e
    return config_from_dict(raw)
