import json
from dataclasses import replace
from typing import Optional
import typer
from sentclf.config import load_config
from sentclf.errors import SentClfError, describe
from sentclf.logger import RunLogger
from sentclf.utils import DEFAULT_CFG, make_run_id

app = typer.Typer(help="sentclf  BERT sentence classification over tab-separated files")


def _config(cfg: Optional[str], max_length: Optional[int] = None, pad: Optional[bool] = None,
            truncate: Optional[bool] = None, device: Optional[str] = None, log_file: Optional[str] = None):
    config = load_config(cfg or (DEFAULT_CFG if DEFAULT_CFG.exists() else None))
    config = replace(config, tokenizer=config.tokenizer.with_length(max_length, pad=pad, truncate=truncate))
    if device: config = replace(config, model=replace(config.model, device=device))
    if log_file: config = replace(config, logging=replace(config.logging, file=log_file))
    return config.validate()


def _fail(err: SentClfError, logger: Optional[RunLogger] = None):
    msg = describe(err)
    if logger: logger.error(msg)
    typer.echo(f"[sentclf] {msg}", err=True)
    raise typer.Exit(code=1)


@app.command()
def predict(model: str = typer.Option(..., "--model", "-m", help="TorchScript model file"),
            tokenizer: str = typer.Option(..., "--tokenizer", "-t", help="WordPiece vocab file"),
            input: str = typer.Option(..., "--input", "-i", help="Tab-separated file with a 'sentence' column"),
            output: str = typer.Option(..., "--output", "-o", help="Where to write the table with 'labels'"),
            cfg: Optional[str] = typer.Option(None, help="Config YAML"),
            device: Optional[str] = typer.Option(None, help="auto | cpu | cuda"),
            max_length: Optional[int] = typer.Option(None, help="Padding/truncation length"),
            pad: Optional[bool] = typer.Option(None, "--pad/--no-pad"),
            truncate: Optional[bool] = typer.Option(None, "--truncate/--no-truncate"),
            log_file: Optional[str] = typer.Option(None, help="Log file (appended)"),
            progress: bool = typer.Option(True, "--progress/--no-progress")):
    from sentclf.predict import run_prediction
    try:
        config = _config(cfg, max_length, pad, truncate, device, log_file)
        run_logger = RunLogger(make_run_id(config.name), config.logging.file, config.logging.events_file,
                               config.logging.level)
    except SentClfError as e:
        _fail(e)
    with run_logger as logger:
        logger.info("Start program")
        try:
            out_path = run_prediction(model, tokenizer, input, output, config, logger, progress=progress)
        except SentClfError as e:
            _fail(e, logger)
        logger.info("Done")
    typer.echo(f"[sentclf] Saved predictions -> {out_path}")


@app.command()
def encode(text: str = typer.Argument(..., help="Sentence to encode"),
           tokenizer: str = typer.Option(..., "--tokenizer", "-t", help="WordPiece vocab file"),
           cfg: Optional[str] = typer.Option(None, help="Config YAML"),
           max_length: Optional[int] = typer.Option(None),
           pad: Optional[bool] = typer.Option(None, "--pad/--no-pad"),
           truncate: Optional[bool] = typer.Option(None, "--truncate/--no-truncate")):
    from sentclf.tokenization.pipeline import Tokenizer
    try:
        config = _config(cfg, max_length, pad, truncate)
        enc = Tokenizer.from_file(tokenizer, config.tokenizer).encode(text)
    except SentClfError as e:
        _fail(e)
    typer.echo(json.dumps(enc.to_dict(), ensure_ascii=False))


@app.command("check-tokenizer")
def check_tokenizer(tokenizer: str = typer.Option(..., "--tokenizer", "-t", help="WordPiece vocab file"),
                    input: str = typer.Option(..., "--input", "-i", help="Tab-separated file with a 'sentence' column"),
                    cfg: Optional[str] = typer.Option(None, help="Config YAML"),
                    max_length: Optional[int] = typer.Option(None),
                    pad: Optional[bool] = typer.Option(None, "--pad/--no-pad"),
                    truncate: Optional[bool] = typer.Option(None, "--truncate/--no-truncate"),
                    out: Optional[str] = typer.Option(None, help="Save the JSON report here")):
    from sentclf.parity import check_parity
    from sentclf.table_io import read_table
    from sentclf.tokenization.pipeline import Tokenizer
    from sentclf.utils import save_json
    try:
        config = _config(cfg, max_length, pad, truncate)
        tok = Tokenizer.from_file(tokenizer, config.tokenizer)
        df = read_table(input, text_col=config.data.text_col, sep=config.data.sep)
        rep = check_parity(tok, df[config.data.text_col].tolist())
    except SentClfError as e:
        _fail(e)
    typer.echo(f"[sentclf] Tokenizer parity: {rep['n'] - rep['mismatches']}/{rep['n']} sentences match")
    if out:
        save_json(rep, out); typer.echo(f"[sentclf] Saved -> {out}")
    if rep["mismatches"]:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
