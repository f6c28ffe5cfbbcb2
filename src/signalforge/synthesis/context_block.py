"""Deterministic context block rendered for each run."""

from collections.abc import Mapping, Sequence

from signalforge.data import BaselineAnchor, ScoredRecord

MAX_CLAIMS = 5
MAX_BASELINE_LINES = 6
DEGRADED_PREFIX = "DEGRADED_SIGNAL_"

RESEARCH_PROMPT = (
    "You are an expert research assistant. Expand on the top claims above. "
    "Provide concise bullet points with citations where possible."
)


def _format_claim(index: int, record: ScoredRecord) -> str:
    return (
        f"{index}. {record.title} ({record.source}) "
        f"[grade={record.evidence_grade} origins={record.origin_count} "
        f"echo={record.echo_risk:.2f}]"
    )


def _format_baseline(anchor: BaselineAnchor) -> str:
    baselines = "; ".join(f"{b.title} ({b.published_at[:10]})" for b in anchor.baselines)
    return f"- Now: {anchor.current_title} | Baseline: {baselines}"


def build_context_block(
    *,
    query: str,
    window_days: int,
    source_counts: Mapping[str, int],
    integrity_score: int,
    flags: Sequence[str],
    target: str,
    top_items: Sequence[ScoredRecord],
    anchors: Sequence[BaselineAnchor] = (),
) -> str:
    """Render the plain-text context block for a run.

    Args:
        query: The run query as typed.
        window_days: Collection window in days.
        source_counts: Kept records per source.
        integrity_score: Integrity total (0-100).
        flags: Run flags.
        target: Prompt target (``gpt`` or ``codex``).
        top_items: Ranked records; the first five are listed as claims.
        anchors: Baseline anchors; clusters without baselines are skipped.

    Returns:
        The context block text (no trailing newline).
    """
    counts = ", ".join(f"{source}:{count}" for source, count in source_counts.items())
    flags_text = ", ".join(flags) if flags else "none"
    degraded = any(flag.startswith(DEGRADED_PREFIX) for flag in flags)

    claims = [_format_claim(i, record) for i, record in enumerate(top_items[:MAX_CLAIMS], 1)]
    baseline_lines = [_format_baseline(a) for a in anchors if a.baselines][:MAX_BASELINE_LINES]

    lines = [
        "SIGNALFORGE RUN",
        f"Query: {query}",
        f"Window: last {window_days} days",
        f"Sources: {counts or 'none'}",
        f"Integrity: {integrity_score}/100   Flags: {flags_text}",
    ]
    if degraded:
        lines.append("Note: degraded signal - verify critical claims.")
    lines += [
        "",
        "TOP CLAIMS (ranked)",
        "\n".join(claims) or "1. No claims available",
        "",
        "WHAT CHANGED VS BASELINE",
        "\n".join(baseline_lines) or "None.",
        "",
        f"PROMPT PACK FOR {target.upper()}",
        "PROMPT 1 - Research Expansion",
        RESEARCH_PROMPT,
    ]
    return "\n".join(lines)
