"""
Command line interface.

    condparser eval "isWindows && !isDebug" --config flags.yaml --set isWindows
    condparser select --config flags.yaml
    condparser selftest
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
import yaml

from .config import ConfigError, load_config
from .diagnostics import StreamSink
from .logic.evaluator import ConditionError, ConditionEvaluator
from .logic.rules import RuleEngine
from .models import ConditionConfig, FlagTable
from .selftest import run_selftest

app = typer.Typer(help="Evaluate boolean condition expressions over named flags")


def _load(config: Optional[Path]) -> ConditionConfig:
    if config is None:
        return ConditionConfig()
    try:
        return load_config(config)
    except ConfigError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Evaluate boolean condition expressions over named flags."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command("eval")
def eval_command(
    expression: str = typer.Argument(..., help="Condition expression"),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML file with settings and flags"
    ),
    set_flags: List[str] = typer.Option(
        [], "--set", "-s", help="Flag to force true (repeatable)"
    ),
    unset_flags: List[str] = typer.Option(
        [], "--unset", "-u", help="Flag to force false (repeatable)"
    ),
    strict: bool = typer.Option(
        False, "--strict", help="Exit with code 2 if the expression is malformed"
    ),
) -> None:
    """Evaluate an expression and print true or false."""
    cfg = _load(config)
    try:
        flags: FlagTable = cfg.flag_table().with_overrides(set_flags, unset_flags)
    except ValueError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)

    evaluator = ConditionEvaluator(cfg.settings)
    sink = StreamSink()

    if not strict:
        value = evaluator.evaluate(expression, flags.resolve, sink)
        typer.echo("true" if value else "false")
        return

    result = evaluator.evaluate_detailed(expression, flags.resolve, sink)
    typer.echo("true" if result.value else "false")
    if not result.valid:
        raise typer.Exit(code=2)


@app.command("select")
def select_command(
    config: Path = typer.Option(..., "--config", "-c", help="YAML file with flags and rules"),
    set_flags: List[str] = typer.Option(
        [], "--set", "-s", help="Flag to force true (repeatable)"
    ),
    unset_flags: List[str] = typer.Option(
        [], "--unset", "-u", help="Flag to force false (repeatable)"
    ),
) -> None:
    """Evaluate the configured rules and print the matches as YAML."""
    cfg = _load(config)
    try:
        flags = cfg.flag_table().with_overrides(set_flags, unset_flags)
    except ValueError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)

    engine = RuleEngine.from_rule_set(cfg.rules, settings=cfg.settings)
    try:
        result = engine.select(cfg.rules.items, flags.resolve)
    except ConditionError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)

    for error in result.errors:
        typer.echo(error, err=True)
    typer.echo(yaml.safe_dump(result.to_dict(), default_flow_style=False, sort_keys=False), nl=False)


@app.command("selftest")
def selftest_command() -> None:
    """Run the built-in calibration cases."""
    if not run_selftest():
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
