from typing import List

from stylepack.lint.compiler import CompiledVoiceRules, compile_voice
from stylepack.lint.utils import create_violation, match_case
from stylepack.models import Violation, Voice


def check_forbidden_words(text: str, compiled: CompiledVoiceRules) -> List[Violation]:
    """Every occurrence of a forbidden term is an error."""
    violations = []

    for matcher in compiled.forbidden:
        for match in matcher.regex.finditer(text):
            violations.append(
                create_violation(
                    "vocabulary.forbidden",
                    "error",
                    f'Forbidden phrase: "{matcher.term}"',
                    match.group(0),
                    match.start(),
                    match.end(),
                    f'Remove or replace "{matcher.term}"',
                )
            )

    return violations


def check_vocabulary_rules(
    text: str,
    compiled: CompiledVoiceRules,
    default_severity: str = "error",
) -> List[Violation]:
    """Flag avoided terms and suggest the preferred one."""
    violations = []

    for matcher in compiled.vocabulary:
        for match in matcher.regex.finditer(text):
            violations.append(
                create_violation(
                    "vocabulary.preferred",
                    matcher.severity or default_severity,
                    f'Use "{matcher.preferred}" instead of "{matcher.avoid}"',
                    match.group(0),
                    match.start(),
                    match.end(),
                    match_case(match.group(0), matcher.preferred),
                    fixable=True,
                )
            )

    return violations


def check_do_not_patterns(text: str, compiled: CompiledVoiceRules) -> List[Violation]:
    """Flag do-not matches that are not whitelisted by the rule's exceptions."""
    violations = []

    for matcher in compiled.do_not:
        for match in matcher.regex.finditer(text):
            matched = match.group(0)
            if not matched or matched.lower() in matcher.exceptions:
                continue
            violations.append(
                create_violation(
                    matcher.rule_id,
                    matcher.severity,
                    matcher.reason,
                    matched,
                    match.start(),
                    match.end(),
                    matcher.suggestion,
                    fixable=True,
                )
            )

    return violations


def check_voice_rules(text: str, voice: Voice, vocabulary_severity: str = "error") -> List[Violation]:
    """Run forbidden-term, vocabulary and do-not checks."""
    compiled = compile_voice(voice)
    violations = []
    violations.extend(check_forbidden_words(text, compiled))
    violations.extend(check_vocabulary_rules(text, compiled, vocabulary_severity))
    violations.extend(check_do_not_patterns(text, compiled))
    return violations
