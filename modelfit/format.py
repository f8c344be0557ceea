"""Terminal output formatting: box layout, colors, width control."""

import shutil
from typing import List

import click

from .checks.base import format_bytes
from .devices import select_best_device
from .models import CapabilityProfile, PerformanceTier, RequirementsProfile
from .verdict import Verdict

_TIER_COLORS = {
    PerformanceTier.EXCELLENT: "green",
    PerformanceTier.GOOD: "green",
    PerformanceTier.FAIR: "yellow",
    PerformanceTier.POOR: "yellow",
    PerformanceTier.UNUSABLE: "red",
}


def _get_width() -> int:
    try:
        return min(72, shutil.get_terminal_size((72, 24)).columns)
    except OSError:
        return 72


def _wrap(text: str, indent: int = 0, width: int = 72) -> List[str]:
    """Wrap text to width, first line has indent, following lines +2."""
    prefix = " " * indent
    extra = "  "
    lines = []
    rest = text
    first = True
    while rest:
        max_len = width - (indent if first else indent + len(extra))
        if len(rest) <= max_len:
            lines.append(prefix + rest)
            break
        break_at = rest.rfind(" ", 0, max_len + 1)
        if break_at <= 0:
            break_at = max_len
        chunk = rest[:break_at].strip()
        rest = rest[break_at:].strip()
        lines.append(prefix + chunk)
        prefix = " " * indent + extra
        first = False
    return lines


def capability_summary(cap: CapabilityProfile) -> str:
    """One-line machine summary, e.g. 'Linux x86_64, 8 cores, 16.0GB RAM, discrete GPU 8.0GB'."""
    parts = [f"{cap.platform} {cap.architecture}".strip(), f"{cap.cpu.core_count} cores", f"{format_bytes(cap.total_memory)} RAM"]
    if cap.has_accelerator and cap.devices:
        best = select_best_device(cap.devices)
        parts.append(f"{best.kind.value} GPU {format_bytes(best.total_memory)} (API {best.api_version})")
    elif cap.accelerator_available:
        parts.append("accelerator reported, no devices")
    else:
        parts.append("no accelerator")
    return ", ".join(parts)


def _estimate_line(verdict: Verdict) -> str:
    est = verdict.performance_estimate
    if est is None:
        return ""
    line = f"~{est.tokens_per_second:.1f} tok/s · {est.memory_usage_percent:.0f}% RAM"
    if est.bottleneck.value != "none":
        line += f" · bottleneck: {est.bottleneck.value}"
    return line


def _section(lines: List[str], title: str, items, bullet: str, width: int, **style) -> None:
    if not items:
        return
    lines.append(f" {title}")
    for item in items:
        for ln in _wrap(f"{bullet} {item}", indent=2, width=width):
            lines.append(click.style(ln, **style))


def format_human(
    verdict: Verdict,
    req: RequirementsProfile | None = None,
    cap: CapabilityProfile | None = None,
    verbose: bool = False,
) -> str:
    """Build the human terminal output as a single string."""
    width = _get_width()
    lines = []
    name = req.display_name if req else verdict.model_id

    lines.append("┌" + "─" * (width - 2) + "┐")
    lines.append(f" modelfit · {name}")
    if cap is not None:
        lines.append(click.style(f" {capability_summary(cap)}", dim=True))
    lines.append("─" * width)

    tier = verdict.performance_tier
    status = "compatible" if verdict.compatible else "NOT compatible"
    lines.append(click.style(f" Tier     {tier.value} ({status})", fg=_TIER_COLORS[tier]))
    est = _estimate_line(verdict)
    if est:
        lines.append(click.style(f" Estimate {est}", dim=True))
    lines.append("─" * width)

    if verdict.compatible:
        lines.append(f" {verdict.reason}.")
    else:
        issues = list(verdict.issues)
        if verbose:
            issues = [f"{i} [{tag}]" for i, tag in zip(issues, verdict.missing_requirements)]
        _section(lines, "HARD FAILURES", issues, "●", width, fg="red")
    _section(lines, "WARNINGS", verdict.warnings, "○", width, dim=True)
    _section(lines, "RECOMMENDATIONS", verdict.recommendations, "→", width)

    lines.append("─" * width)
    footer = " Run with --json for machine output  ·  --ci for exit codes"
    if len(footer) > width:
        footer = " --json  ·  --ci  ·  --help"
    lines.append(click.style(footer, dim=True))
    lines.append("└" + "─" * (width - 2) + "┘")
    return "\n".join(lines)


def format_markdown(
    verdict: Verdict,
    req: RequirementsProfile | None = None,
    cap: CapabilityProfile | None = None,
) -> str:
    """Markdown report for docs/PRs."""
    out = [f"# modelfit: {req.display_name if req else verdict.model_id}", ""]
    out.append(f"**Performance tier: {verdict.performance_tier.value}**"
               f" ({'compatible' if verdict.compatible else 'not compatible'})")
    est = _estimate_line(verdict)
    if est:
        out += ["", f"Estimate: {est}"]
    if cap is not None:
        out += ["", "## Machine", f"- {capability_summary(cap)}"]
    if not verdict.compatible:
        out += ["", "## Hard failures"] + [f"- {i}" for i in verdict.issues]
    if verdict.warnings:
        out += ["", "## Warnings"] + [f"- {w}" for w in verdict.warnings]
    if verdict.recommendations:
        out += ["", "## Recommendations"] + [f"- {r}" for r in verdict.recommendations]
    return "\n".join(out)


def format_survey(verdicts: List[Verdict], cap: CapabilityProfile | None = None) -> str:
    """One line per model, best fit first."""
    lines = []
    if cap is not None:
        lines.append(f"Machine: {capability_summary(cap)}")
        lines.append("")
    ok = sum(1 for v in verdicts if v.compatible)
    lines.append(f"{len(verdicts)} model(s) evaluated. {ok} compatible.")
    lines.append("")
    for v in verdicts:
        tier = v.performance_tier
        label = click.style(f"[{tier.value.upper():9}]", fg=_TIER_COLORS[tier])
        detail = _estimate_line(v) if v.compatible else ", ".join(v.missing_requirements)
        lines.append(f"  {label} {v.model_id}: {detail}")
    return "\n".join(lines)
