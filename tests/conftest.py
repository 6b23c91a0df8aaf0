import pathlib
import pytest
import torch

SPEC_VOCAB = ["[CLS]", "[SEP]", "[PAD]", "[UNK]", "play", "##ing"]
REVIEW_VOCAB = ["[CLS]", "[SEP]", "[PAD]", "[UNK]", "good", "bad", "movie", "##s", "!", "boom"]


class BagOfWordsClassifier(torch.nn.Module):
    """'good' votes for class 1, 'bad' for class 0; class 0 wins ties via a small bias; 'boom' raises."""

    def __init__(self, vocab_size: int, good_id: int, bad_id: int, boom_id: int):
        super().__init__()
        weight = torch.zeros(vocab_size, 2)
        weight[good_id, 1] = 1.0; weight[bad_id, 0] = 1.0
        self.weight = torch.nn.Parameter(weight, requires_grad=False)
        self.bias = torch.nn.Parameter(torch.tensor([0.5, 0.0]), requires_grad=False)
        self.boom_id = boom_id

    def forward(self, input_ids: torch.Tensor, attention_mask: torch.Tensor) -> torch.Tensor:
        if bool((input_ids == self.boom_id).any()):
            raise RuntimeError("boom token")
        votes = self.weight[input_ids] * attention_mask.unsqueeze(-1).to(torch.float32)
        return votes.sum(dim=1) + self.bias


def write_vocab(path: pathlib.Path, tokens) -> pathlib.Path:
    path.write_text("\n".join(tokens) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def spec_vocab_file(tmp_path):
    return write_vocab(tmp_path / "vocab.txt", SPEC_VOCAB)


@pytest.fixture
def review_vocab_file(tmp_path):
    return write_vocab(tmp_path / "review_vocab.txt", REVIEW_VOCAB)


@pytest.fixture
def model_file(tmp_path):
    ids = {t: i for i, t in enumerate(REVIEW_VOCAB)}
    model = BagOfWordsClassifier(len(REVIEW_VOCAB), ids["good"], ids["bad"], ids["boom"]).eval()
    path = tmp_path / "model.pt"
    torch.jit.script(model).save(str(path))
    return path


@pytest.fixture
def sentences_file(tmp_path):
    path = tmp_path / "sentences.tsv"
    path.write_text("id\tsentence\n1\tGood movies!\n2\tA bad movie\n3\t\n", encoding="utf-8")
    return path
