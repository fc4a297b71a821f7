from typing import List, Optional, Sequence, Tuple, Union

from stylepack.lint.validator import validate
from stylepack.models import (
    Change,
    Pack,
    Position,
    RewriteResult,
    ScoreDelta,
    ValidationContext,
    Violation,
)

MODES = {
    "minimal": ("error",),
    "normal": ("error", "warning"),
    "aggressive": ("error", "warning", "info"),
}


def _change_type(rule: str) -> str:
    return rule.split(".", 1)[0]


def _overlaps(start: int, end: int, applied: List[Tuple[int, int]]) -> bool:
    return any(start < a_end and a_start < end for a_start, a_end in applied)


def select_fixes(violations: List[Violation], fix_severity: Sequence[str]) -> List[Violation]:
    """Fixable violations, right-most first."""
    candidates = [
        v for v in violations
        if v.severity in fix_severity
        and v.position is not None
        and v.suggestion is not None
        and v.fixable
    ]
    # sorted() is stable, so equal ranges keep validator order
    return sorted(candidates, key=lambda v: (v.position.start, v.position.end), reverse=True)


def apply_fixes(text: str, fixes: List[Violation]) -> Tuple[str, List[Change]]:
    """Splice suggestions into text from right to left.

    Working right to left keeps every lower offset valid while the text
    changes length. A fix whose range overlaps one already applied is skipped.
    """
    rewritten = text
    applied: List[Tuple[int, int]] = []
    changes: List[Change] = []

    for v in fixes:
        start, end = v.position.start, v.position.end
        if _overlaps(start, end, applied):
            continue
        rewritten = rewritten[:start] + v.suggestion + rewritten[end:]
        applied.append((start, end))
        changes.append(
            Change(
                type=_change_type(v.rule),
                original=text[start:end],
                replacement=v.suggestion,
                reason=v.message,
                position=Position(start=start, end=end),
            )
        )

    changes.reverse()
    return rewritten, changes


def rewrite(
    pack: Pack,
    text: str,
    context: Optional[Union[ValidationContext, dict]] = None,
    fix_severity: Sequence[str] = MODES["normal"],
) -> RewriteResult:
    """Rule-based rewrite: apply every non-conflicting suggested fix."""
    before = validate(pack, text, context)
    fixes = select_fixes(before.violations, fix_severity)
    rewritten, changes = apply_fixes(text, fixes)

    if changes:
        after_score = validate(pack, rewritten, context).score
    else:
        after_score = before.score

    return RewriteResult(
        original=text,
        rewritten=rewritten,
        changes=changes,
        score=ScoreDelta(before=before.score, after=after_score),
    )


def rewrite_minimal(pack: Pack, text: str, context=None) -> RewriteResult:
    """Fix errors only."""
    return rewrite(pack, text, context, fix_severity=MODES["minimal"])


def rewrite_aggressive(pack: Pack, text: str, context=None) -> RewriteResult:
    """Fix errors, warnings and info."""
    return rewrite(pack, text, context, fix_severity=MODES["aggressive"])


def rewrite_with_mode(pack: Pack, text: str, mode: str = "normal", context=None) -> RewriteResult:
    if mode not in MODES:
        raise ValueError(f"Unknown rewrite mode: {mode}")
    return rewrite(pack, text, context, fix_severity=MODES[mode])


def format_changes(result: RewriteResult) -> str:
    """Human-readable summary of a rewrite."""
    if not result.changes:
        return "No changes made."

    lines = [f"{len(result.changes)} change(s), score {result.score.before} → {result.score.after}:"]
    for change in result.changes:
        lines.append(f'- "{change.original}" → "{change.replacement}" ({change.reason})')
    return "\n".join(lines)


def generate_diff(result: RewriteResult) -> str:
    """Line-oriented diff of each change."""
    if not result.changes:
        return "No changes."

    lines = []
    for change in result.changes:
        lines.append(f"@@ {change.position.start},{change.position.end} @@ {change.type}")
        lines.append(f"- {change.original}")
        lines.append(f"+ {change.replacement}")
    return "\n".join(lines)
