import pytest
import torch
from sentclf.errors import FileError, ModelError, ModelLoadError
from sentclf.inference.device import probe_device
from sentclf.inference.invoker import ModelInvoker


def test_probe_device():
    assert probe_device("cpu") == torch.device("cpu")
    assert probe_device("auto").type == ("cuda" if torch.cuda.is_available() else "cpu")


@pytest.mark.skipif(torch.cuda.is_available(), reason="needs a machine without CUDA")
def test_cuda_policy_without_cuda():
    with pytest.raises(ModelLoadError):
        probe_device("cuda")


def test_predict_argmax(model_file):
    inv = ModelInvoker.load(model_file, torch.device("cpu"))
    # [CLS] good movie [SEP] [PAD]
    assert inv.predict([0, 4, 6, 1, 2], [1, 1, 1, 1, 0]) == 1
    # [CLS] bad [SEP]
    assert inv.predict([0, 5, 1], [1, 1, 1]) == 0
    # padded 'good' positions are masked out
    assert inv.predict([0, 1, 4, 4], [1, 1, 0, 0]) == 0


def test_missing_model(tmp_path):
    with pytest.raises(FileError):
        ModelInvoker.load(tmp_path / "model.pt")


def test_corrupt_model(tmp_path):
    path = tmp_path / "model.pt"; path.write_bytes(b"not a torchscript archive")
    with pytest.raises(ModelLoadError):
        ModelInvoker.load(path)


def test_forward_failure(model_file):
    inv = ModelInvoker.load(model_file)
    with pytest.raises(ModelError):
        inv.predict([0, 9, 1], [1, 1, 1])


def test_length_mismatch(model_file):
    with pytest.raises(ModelError):
        ModelInvoker.load(model_file).predict([0, 1], [1])


class TupleOutput(torch.nn.Module):
    def forward(self, input_ids: torch.Tensor, attention_mask: torch.Tensor):
        return (torch.tensor([[0.0, 2.0, 1.0]]), input_ids)


class PerTokenOutput(torch.nn.Module):
    def forward(self, input_ids: torch.Tensor, attention_mask: torch.Tensor):
        return torch.zeros(1, input_ids.shape[1], 3)


def test_tuple_output_uses_first_element():
    inv = ModelInvoker(torch.jit.script(TupleOutput()), torch.device("cpu"))
    assert inv.predict([0, 1], [1, 1]) == 1


def test_per_token_output_is_rejected():
    inv = ModelInvoker(torch.jit.script(PerTokenOutput()), torch.device("cpu"))
    with pytest.raises(ModelError):
        inv.predict([0, 4, 1], [1, 1, 1])
