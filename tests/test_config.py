import dataclasses
import pytest
from sentclf.config import AppConfig, config_from_dict, load_config
from sentclf.errors import ConfigError, FileError
from sentclf.utils import DEFAULT_CFG


def test_default_yaml_matches_builtin_defaults():
    assert load_config(DEFAULT_CFG) == AppConfig()


def test_defaults_truncate_without_padding():
    cfg = AppConfig()
    assert cfg.tokenizer.truncation.enabled and cfg.tokenizer.truncation.max_length == 512
    assert not cfg.tokenizer.padding.enabled
    assert cfg.model.device == "auto" and cfg.data.sep == "\t"


def test_partial_override():
    cfg = config_from_dict({"tokenizer": {"padding": {"enabled": True, "max_length": 64},
                                          "truncation": {"max_length": 64}}, "model": {"device": "cpu"}})
    assert cfg.tokenizer.padding.enabled and cfg.tokenizer.padding.max_length == 64
    assert cfg.tokenizer.truncation.max_length == 64 and cfg.model.device == "cpu"


def test_padding_length_without_truncation():
    cfg = config_from_dict({"tokenizer": {"padding": {"enabled": True, "max_length": 64},
                                          "truncation": {"enabled": False}}})
    assert cfg.tokenizer.padding.max_length == 64 and cfg.tokenizer.truncation.max_length == 512


def test_padding_and_truncation_lengths_must_match():
    with pytest.raises(ConfigError, match="must equal truncation.max_length"):
        config_from_dict({"tokenizer": {"padding": {"enabled": True, "max_length": 8},
                                        "truncation": {"enabled": True, "max_length": 512}}})


def test_config_is_frozen():
    with pytest.raises(dataclasses.FrozenInstanceError):
        AppConfig().tokenizer.padding.enabled = True


@pytest.mark.parametrize("raw", [
    {"tokenizer": {"padding": {"enabeld": True}}},
    {"tokenizer": {"truncation": {"max_length": "long"}}},
    {"tokenizer": {"truncation": {"max_length": 1}}},
    {"tokenizer": {"padding": {"enabled": "yes"}}},
    {"model": {"device": "tpu"}},
    {"logging": {"level": "LOUD"}},
    {"data": []},
])
def test_invalid_values(raw):
    with pytest.raises(ConfigError):
        config_from_dict(raw)


def test_missing_file(tmp_path):
    with pytest.raises(FileError):
        load_config(tmp_path / "none.yaml")


def test_bad_yaml(tmp_path):
    path = tmp_path / "bad.yaml"; path.write_text("tokenizer: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_with_length_sets_both():
    tok = AppConfig().tokenizer.with_length(8, pad=True)
    assert tok.padding.max_length == tok.truncation.max_length == 8 and tok.padding.enabled
