"""CTA checks.

Anti-patterns apply to all text. Guidelines (length, avoided words,
capitalization) only apply to button-like text: short strings or anything
rendered in a button component.
"""
from typing import List, Optional

from stylepack.lint.compiler import CompiledCTARules, compile_cta_rules
from stylepack.lint.utils import count_words, create_violation
from stylepack.models import CTAGuidelines, CTAContextualRule, CTARules, ValidationContext, Violation

SHORT_TEXT_MAX_WORDS = 6
MINOR_WORDS = {"a", "an", "and", "as", "at", "but", "by", "for", "in", "of", "on", "or", "the", "to", "up", "with"}


def is_button_like(text: str, context: Optional[ValidationContext] = None) -> bool:
    if context is not None and context.component == "button":
        return True
    return count_words(text) <= SHORT_TEXT_MAX_WORDS


def check_cta_anti_patterns(text: str, compiled: CompiledCTARules) -> List[Violation]:
    violations = []

    for matcher in compiled.anti_patterns:
        if matcher.is_regex:
            match = matcher.regex.search(text)
        else:
            match = matcher.regex.fullmatch(text)
        if match:
            violations.append(
                create_violation(
                    "cta.antiPattern",
                    "warning",
                    matcher.reason,
                    match.group(0),
                    match.start(),
                    match.end(),
                    matcher.suggestion,
                )
            )

    return violations


def _capitalization_ok(text: str, style: str) -> bool:
    words = text.split()
    if not words:
        return True
    if style == "sentence":
        first = words[0]
        return first[0] == first[0].upper()
    if style == "title":
        return all(
            w[0] == w[0].upper()
            for i, w in enumerate(words)
            if i == 0 or w.lower() not in MINOR_WORDS
        )
    if style == "upper":
        return text == text.upper()
    if style == "lower":
        return text == text.lower()
    return True


def check_cta_guidelines(
    text: str,
    guidelines: CTAGuidelines,
    compiled: CompiledCTARules,
) -> List[Violation]:
    violations = []

    word_count = count_words(text)
    if guidelines.max_words and word_count > guidelines.max_words:
        violations.append(
            create_violation(
                "cta.maxWords",
                "info",
                f"CTA has {word_count} words, max is {guidelines.max_words}",
                text,
                0,
                len(text),
                "Shorten to be more direct",
            )
        )

    for matcher in compiled.avoid_words:
        match = matcher.regex.search(text)
        if match:
            violations.append(
                create_violation(
                    "cta.avoidWord",
                    "error",
                    f'Avoid "{matcher.term}" in CTAs',
                    match.group(0),
                    match.start(),
                    match.end(),
                    "Use a more specific action verb",
                )
            )

    style = guidelines.capitalization
    if style and len(text) > 1 and not _capitalization_ok(text, style):
        violations.append(
            create_violation(
                "cta.capitalization",
                "info",
                f"CTA should use {style} case",
                text,
                0,
                len(text),
            )
        )

    return violations


def check_contextual_rules(
    text: str,
    rules: List[CTAContextualRule],
    context: ValidationContext,
) -> List[Violation]:
    """Apply rules whose context label mentions the text's type or component."""
    violations = []
    lower_text = text.lower()
    context_type = (context.type or "").lower()
    component = (context.component or "").lower()

    for rule in rules:
        rule_context = rule.context.lower()
        applies = (context_type and context_type in rule_context) or (component and component in rule_context)
        if not applies:
            continue

        for forbidden in rule.forbidden:
            if lower_text.strip() == forbidden.lower():
                violations.append(
                    create_violation(
                        "cta.contextForbidden",
                        "warning",
                        f'"{text}" should not be used in {rule.context}',
                        text,
                        0,
                        len(text),
                        f"Try: {', '.join(rule.preferred)}" if rule.preferred else None,
                    )
                )

    return violations


def check_cta_rules(
    text: str,
    cta_rules: CTARules,
    context: Optional[ValidationContext] = None,
) -> List[Violation]:
    compiled = compile_cta_rules(cta_rules)
    violations = []
    violations.extend(check_cta_anti_patterns(text, compiled))
    if is_button_like(text, context):
        violations.extend(check_cta_guidelines(text, cta_rules.guidelines, compiled))
    if context is not None:
        violations.extend(check_contextual_rules(text, cta_rules.contextual_rules, context))
    return violations
