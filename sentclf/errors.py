from __future__ import annotations


class SentClfError(Exception):
    category = "Unknown"


class FileError(SentClfError):
    category = "File"


class FormatError(SentClfError):
    category = "Format"


class ConfigError(FormatError):
    category = "Config"


class ModelError(SentClfError):
    category = "Model"


class ModelLoadError(ModelError):
    category = "Model load"


class TokenizationError(SentClfError):
    category = "Tokenization"


def describe(err: SentClfError) -> str:
    return f"{err.category} error: {err}"
