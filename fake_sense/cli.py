"""fake-sense command line: train, predict and evaluate."""

from __future__ import annotations

import logging
import sys

import click
import structlog

from fake_sense.config import PipelineConfig
from fake_sense.exceptions import FakeSenseError
from fake_sense.pipeline import (
    evaluate,
    explain,
    fake_score,
    load_pipeline,
    load_records,
    predict_one,
    save_pipeline,
    split_records,
    train_pipeline,
)

EXAMPLE_TEXT = "This is an amazing product, I love it!"


def configure_logging(verbose: bool = False) -> None:
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer() if verbose else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if verbose else logging.WARNING
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def format_confusion_matrix(cm) -> str:
    rows = [
        "                 pred genuine  pred fake",
        f"true genuine     {cm[0][0]:>12}  {cm[0][1]:>9}",
        f"true fake        {cm[1][0]:>12}  {cm[1][1]:>9}",
    ]
    return "\n".join(rows)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Show progress logs.")
@click.pass_context
def cli(ctx, verbose):
    """Fake Review Detection CLI"""
    configure_logging(verbose)
    ctx.obj = PipelineConfig.from_env()


@cli.command()
@click.argument("data", required=False, type=click.Path(dir_okay=False))
@click.option("--model", "model_path", type=click.Path(dir_okay=False), help="Where to save the trained artifact.")
@click.option("--text", default=EXAMPLE_TEXT, show_default=True, help="Example review to classify after training.")
@click.option("--holdout", is_flag=True, help="Hold out the configured test fraction and report its accuracy.")
@click.option(
    "--test-size",
    type=click.FloatRange(0, 1, min_open=True, max_open=True),
    default=None,
    help="Hold out this fraction (implies --holdout).",
)
@click.option("--max-features", type=int, default=None, help="Vocabulary size cap.")
@click.option("--alpha", type=float, default=None, help="Naive Bayes smoothing.")
@click.option("--expand-emoji/--no-expand-emoji", default=None, help="Spell emoji out as words before cleaning.")
@click.pass_obj
def train(config, data, model_path, text, holdout, test_size, max_features, alpha, expand_emoji):
    """Train on DATA (CSV: text,label) and classify an example review."""
    config = config.with_overrides(
        train_data_path=data,
        model_path=model_path,
        max_features=max_features,
        alpha=alpha,
        expand_emoji=expand_emoji,
        test_size=test_size,
    )
    try:
        records = load_records(config.train_data_path)
        held_out = []
        if holdout or test_size is not None:
            records, held_out = split_records(
                records, test_size=config.test_size, random_state=config.random_state
            )
        pipeline = train_pipeline(records, config)
        save_pipeline(pipeline, config.model_path)

        click.echo(f"Trained on {len(records)} reviews; model saved to {config.model_path}")
        if held_out:
            result = evaluate(pipeline, held_out)
            click.echo(f"Held-out accuracy: {result.accuracy:.3f} ({result.total} reviews)")
        click.echo(f"Prediction: {str(predict_one(pipeline, text))}")
    except FakeSenseError as e:
        raise click.ClickException(str(e)) from e


@cli.command()
@click.argument("text")
@click.option("--model", "model_path", type=click.Path(dir_okay=False), help="Trained artifact to load.")
@click.option("--explain", "show_explanation", is_flag=True, help="Show the words that drove the decision.")
@click.pass_obj
def predict(config, text, model_path, show_explanation):
    """Classify a single review TEXT."""
    config = config.with_overrides(model_path=model_path)
    try:
        pipeline = load_pipeline(config.model_path)
        click.echo(f"Prediction: {str(predict_one(pipeline, text))}")
        click.echo(f"Fake probability: {fake_score(pipeline, text):.3f}")
        if show_explanation:
            click.echo(explain(pipeline, text)["explanation_text"])
    except FakeSenseError as e:
        raise click.ClickException(str(e)) from e


@cli.command(name="evaluate")
@click.argument("data", type=click.Path(dir_okay=False))
@click.option("--model", "model_path", type=click.Path(dir_okay=False), help="Trained artifact to load.")
@click.option("--plot", "plot_path", type=click.Path(dir_okay=False), help="Save the confusion matrix as a PNG.")
@click.pass_obj
def evaluate_command(config, data, model_path, plot_path):
    """Print accuracy and the confusion matrix on labeled DATA."""
    config = config.with_overrides(model_path=model_path)
    try:
        pipeline = load_pipeline(config.model_path)
        result = evaluate(pipeline, load_records(data))
    except FakeSenseError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Accuracy: {result.accuracy:.4f} ({result.total} reviews)")
    click.echo(format_confusion_matrix(result.confusion_matrix))
    if plot_path:
        from fake_sense.generate_graphs import save_confusion_matrix

        click.echo(f"Saved: {save_confusion_matrix(result, plot_path)}")


def main():
    cli()


if __name__ == "__main__":
    main()
