from datetime import datetime, timezone
from typing import Dict, List, Optional, Union

from stylepack.lint.constraints import check_constraints
from stylepack.lint.cta import check_cta_rules
from stylepack.lint.voice import check_voice_rules
from stylepack.models import (
    Pack,
    ResultMetadata,
    Summary,
    ValidationContext,
    ValidationResult,
    Violation,
)

SEVERITY_PENALTIES: Dict[str, int] = {
    "error": 10,
    "warning": 5,
    "info": 2,
}


def calculate_score(violations: List[Violation]) -> int:
    penalty = sum(SEVERITY_PENALTIES[v.severity] for v in violations)
    return max(0, 100 - penalty)


def summarize(violations: List[Violation]) -> Summary:
    return Summary(
        errors=sum(1 for v in violations if v.severity == "error"),
        warnings=sum(1 for v in violations if v.severity == "warning"),
        info=sum(1 for v in violations if v.severity == "info"),
    )


def _as_context(context) -> Optional[ValidationContext]:
    if context is None or isinstance(context, ValidationContext):
        return context
    return ValidationContext.model_validate(context)


def validate(
    pack: Pack,
    text: str,
    context: Optional[Union[ValidationContext, dict]] = None,
    strict: bool = False,
) -> ValidationResult:
    """Check text against every rule in the pack and score it.

    Violations are ordered by category (forbidden terms, vocabulary,
    do-not patterns, constraints, CTA), then by rule, then by position.
    The pack is never modified.

    `valid` requires no error-severity violations and a score at or above
    the pack's minimum. In strict mode (pack config or `strict=True`) any
    violation at all makes the text invalid.
    """
    context = _as_context(context)
    config = pack.manifest.pack_config

    violations = []
    violations.extend(check_voice_rules(text, pack.voice, config.vocabulary_severity))
    violations.extend(check_constraints(text, pack.voice.constraints))
    violations.extend(check_cta_rules(text, pack.cta_rules, context))

    score = calculate_score(violations)
    summary = summarize(violations)

    valid = summary.errors == 0 and score >= config.min_score
    if strict or config.strict_mode:
        valid = valid and not violations

    return ValidationResult(
        score=score,
        valid=valid,
        violations=violations,
        summary=summary,
        metadata=ResultMetadata(
            pack_name=pack.manifest.name,
            pack_version=pack.manifest.version,
            validated_at=datetime.now(timezone.utc).isoformat(),
        ),
    )
