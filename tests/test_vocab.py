import pytest
from sentclf.errors import FileError, FormatError
from sentclf.tokenization.vocab import Vocabulary


def test_load_ids_follow_line_numbers(spec_vocab_file):
    vocab = Vocabulary.load(spec_vocab_file)
    assert len(vocab) == 6
    assert vocab.id_of("[CLS]") == 0 and vocab.id_of("##ing") == 5
    assert vocab.token_of(4) == "play"
    assert vocab.contains("play") and "play" in vocab
    assert vocab.id_of("missing") is None and not vocab.contains("missing")


def test_missing_file_is_file_error(tmp_path):
    with pytest.raises(FileError):
        Vocabulary.load(tmp_path / "nope.txt")


def test_missing_special_token_is_format_error(tmp_path):
    path = tmp_path / "v.txt"; path.write_text("[CLS]\n[SEP]\n[PAD]\nhello\n", encoding="utf-8")
    with pytest.raises(FormatError, match=r"\[UNK\]"):
        Vocabulary.load(path)


@pytest.mark.parametrize("content", ["", "\n\n", "[CLS]\n\n[SEP]\n[PAD]\n[UNK]\n", "[CLS]\n[SEP]\n[PAD]\n[UNK]\n[CLS]\n"])
def test_malformed_vocab(tmp_path, content):
    path = tmp_path / "v.txt"; path.write_text(content, encoding="utf-8")
    with pytest.raises(FormatError):
        Vocabulary.load(path)


def test_not_utf8(tmp_path):
    path = tmp_path / "v.txt"; path.write_bytes(b"[CLS]\n\xff\xfe\n")
    with pytest.raises(FormatError):
        Vocabulary.load(path)


def test_trailing_whitespace_and_crlf(tmp_path):
    path = tmp_path / "v.txt"; path.write_bytes(b"[CLS]\r\n[SEP] \r\n[PAD]\r\n[UNK]\r\nhi\r\n\r\n")
    vocab = Vocabulary.load(path)
    assert vocab.id_of("[SEP]") == 1 and vocab.id_of("hi") == 4 and len(vocab) == 5


def test_read_only(spec_vocab_file):
    vocab = Vocabulary.load(spec_vocab_file)
    d = vocab.as_dict(); d["new"] = 99
    assert "new" not in vocab
