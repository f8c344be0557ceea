"""CLI entry point: load profiles, evaluate, output clearly."""

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional

import typer

from .checks.base import format_bytes
from .engine import evaluate
from .errors import ModelFitError, SystemDetectionError
from .format import format_human, format_markdown, format_survey
from .loader import load_capability
from .models import CapabilityProfile, PerformanceTier
from .registry import ModelRegistry, default_registry
from .remediation import REMEDIATION_INFO, explain
from .survey import registry_alternatives, survey, survey_summary

logger = logging.getLogger(__name__)

app = typer.Typer(help="Predict whether a local model will run acceptably on your machine.")

HOST_HELP = "Capability profile (JSON/YAML) from your hardware scanner"
MODELS_HELP = "Extra model registry file(s), merged over the built-ins"


def _err(msg: str) -> None:
    """Print a usage error in red on stderr and exit 2."""
    typer.secho(f"Error: {msg}", fg=typer.colors.RED, err=True)
    raise typer.Exit(2)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _registry(models: Optional[List[Path]]) -> ModelRegistry:
    try:
        return default_registry(models or ())
    except ModelFitError as e:
        _err(str(e))


def _capability(host_file: Path) -> CapabilityProfile:
    """Load the machine profile; a failure here stops before any evaluation."""
    try:
        return load_capability(host_file)
    except SystemDetectionError as e:
        logger.debug("System detection failed: %s", e)
        _err(f"{e}\nCreate one with your hardware scanner, e.g. modelfit check MODEL -H host.json")


@app.command("check")
def check_cmd(
    model_id: str = typer.Argument(..., help="Model id (see: modelfit models)"),
    host_file: Path = typer.Option(..., "--host", "-H", help=HOST_HELP),
    json_out: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    markdown_out: bool = typer.Option(False, "--markdown", "-m", help="Output as Markdown"),
    ci: bool = typer.Option(False, "--ci", help="CI mode: exit 1 if the model is not compatible"),
    min_tier: str = typer.Option(None, "--min-tier", help="In CI mode: also fail below this tier (poor/fair/good/excellent)"),
    alternatives: bool = typer.Option(True, "--alternatives/--no-alternatives", help="Suggest compatible registry models"),
    models: Optional[List[Path]] = typer.Option(None, "--models", help=MODELS_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging and failure tags"),
) -> None:
    """Evaluate one model against a machine."""
    _configure_logging(verbose)
    threshold = _parse_tier(min_tier)
    registry = _registry(models)
    cap = _capability(host_file)
    finder = registry_alternatives(registry) if alternatives else None
    verdict = evaluate(model_id, cap, registry, finder)
    req = registry.get_requirements(model_id)

    if json_out:
        typer.echo(verdict.to_json())
    elif markdown_out:
        typer.echo(format_markdown(verdict, req, cap))
    else:
        typer.echo(format_human(verdict, req, cap, verbose=verbose))

    if ci:
        _ci_exit(verdict, threshold)


def _parse_tier(min_tier: Optional[str]) -> Optional[PerformanceTier]:
    """Validated before any evaluation, with or without --ci."""
    if not min_tier:
        return None
    try:
        return PerformanceTier(min_tier.lower())
    except ValueError:
        _err(f"Unknown tier: {min_tier}\nAvailable: {', '.join(t.value for t in PerformanceTier)}")


def _ci_exit(verdict, threshold: Optional[PerformanceTier]) -> None:
    """Exit 1 when incompatible, or below the threshold tier if one is given."""
    if not verdict.compatible:
        raise typer.Exit(1)
    if threshold is not None and verdict.performance_tier.rank < threshold.rank:
        raise typer.Exit(1)


@app.command("survey")
def survey_cmd(
    host_file: Path = typer.Option(..., "--host", "-H", help=HOST_HELP),
    category: str = typer.Option(None, "--category", "-c", help="Only this category (llm/vision/audio/multimodal)"),
    json_out: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    models: Optional[List[Path]] = typer.Option(None, "--models", help=MODELS_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Evaluate every registered model against a machine, best fit first."""
    _configure_logging(verbose)
    registry = _registry(models)
    cap = _capability(host_file)
    try:
        verdicts = survey(cap, registry, category=category)
    except ValueError:
        _err(f"Unknown category: {category}")
    if json_out:
        typer.echo(json.dumps(survey_summary(verdicts), indent=2))
        return
    if not verdicts:
        typer.echo("No models registered.")
        return
    typer.echo(format_survey(verdicts, cap))


@app.command("models")
def models_cmd(
    category: str = typer.Option(None, "--category", "-c", help="Only this category"),
    json_out: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    models: Optional[List[Path]] = typer.Option(None, "--models", help=MODELS_HELP),
) -> None:
    """List registered models and their minimum requirements."""
    registry = _registry(models)
    try:
        profiles = registry.by_category(category) if category else list(registry.values())
    except ValueError:
        _err(f"Unknown category: {category}")
    if json_out:
        typer.echo(json.dumps([asdict(p) for p in profiles], indent=2))
        return
    for p in profiles:
        accel = "accelerator required" if p.accelerator.requires_accelerator else "CPU ok"
        typer.echo(
            f"  {p.id:14} {p.display_name:22} {p.category.value:10} "
            f"RAM >= {format_bytes(p.memory.minimum)}, {p.compute.min_cores}+ cores, {accel}"
        )


@app.command("explain")
def explain_cmd(
    tag: str = typer.Argument(..., help="Missing-requirement tag, or 'list'"),
) -> None:
    """Explain a missing-requirement tag and how to fix it."""
    if tag in ("list", "tags"):
        typer.echo("Known tags:")
        for t in REMEDIATION_INFO:
            typer.echo(f"  {t}")
        typer.echo("\nUse: modelfit explain <tag>")
        return
    info = explain(tag)
    if not info:
        _err(f"Unknown tag: {tag}\nAvailable: {', '.join(REMEDIATION_INFO.keys())}")
    typer.echo(f"Tag: {tag}")
    typer.echo(f"Description: {info['description']}")
    typer.echo(f"When: {info['when']}")
    for fix in info["fix"]:
        typer.echo(f"Fix: {fix}")


def _main() -> None:
    app()


if __name__ == "__main__":
    _main()
