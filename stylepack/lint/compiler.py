"""Compile pack rules into reusable regular expressions.

Compiled rules are stored on the Voice / CTARules object they were built
from, so a pack that is validated many times compiles its patterns once.
Distinct objects compile independently even when their content is equal.
"""
import logging
import re
import threading
from typing import FrozenSet, List, NamedTuple, Optional

from stylepack.errors import RuleCompileWarning
from stylepack.lint.utils import slugify, word_pattern
from stylepack.models import CTARules, Voice

logger = logging.getLogger(__name__)

DEFAULT_FLAGS = "gi"

# JS-style flag letters accepted in packs. g/u/y have no Python equivalent.
FLAG_MAP = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "g": 0,
    "u": 0,
    "y": 0,
}

_lock = threading.Lock()


class ForbiddenMatcher(NamedTuple):
    term: str
    regex: re.Pattern


class VocabularyMatcher(NamedTuple):
    preferred: str
    avoid: str
    regex: re.Pattern
    severity: Optional[str]


class DoNotMatcher(NamedTuple):
    rule_id: str
    regex: re.Pattern
    reason: str
    severity: str
    suggestion: Optional[str]
    exceptions: FrozenSet[str]


class CompiledVoiceRules(NamedTuple):
    forbidden: List[ForbiddenMatcher]
    vocabulary: List[VocabularyMatcher]
    do_not: List[DoNotMatcher]


class AntiPatternMatcher(NamedTuple):
    regex: re.Pattern
    is_regex: bool
    reason: str
    suggestion: Optional[str]


class CompiledCTARules(NamedTuple):
    anti_patterns: List[AntiPatternMatcher]
    avoid_words: List[ForbiddenMatcher]


def parse_flags(flags: Optional[str]) -> int:
    value = 0
    for letter in flags if flags is not None else DEFAULT_FLAGS:
        if letter not in FLAG_MAP:
            raise ValueError(f"unknown regex flag '{letter}'")
        value |= FLAG_MAP[letter]
    return value


def compile_pattern(pattern: str, is_regex: bool, flags: Optional[str] = None) -> re.Pattern:
    """Compile a pack pattern; literal patterns are escaped first."""
    try:
        if is_regex:
            return re.compile(pattern, parse_flags(flags))
        return re.compile(re.escape(pattern), parse_flags(DEFAULT_FLAGS))
    except (re.error, ValueError) as e:
        raise RuleCompileWarning(pattern, str(e)) from e


def _compile_voice(voice: Voice) -> CompiledVoiceRules:
    forbidden = [ForbiddenMatcher(term, word_pattern(term)) for term in voice.vocabulary.forbidden]

    vocabulary = [
        VocabularyMatcher(rule.preferred, avoid, word_pattern(avoid), rule.severity)
        for rule in voice.vocabulary.rules
        for avoid in rule.avoid
    ]

    do_not = []
    for index, rule in enumerate(voice.do_not):
        try:
            regex = compile_pattern(rule.pattern, rule.is_regex, rule.regex_flags)
        except RuleCompileWarning as w:
            logger.warning("Skipping do-not rule in voice '%s': %s", voice.name, w)
            continue
        rule_id = f"doNot.pattern-{index}" if rule.is_regex else f"doNot.{slugify(rule.pattern)}"
        exceptions = frozenset(e.lower() for e in rule.exceptions or [])
        do_not.append(
            DoNotMatcher(rule_id, regex, rule.reason, rule.severity, rule.suggestion, exceptions)
        )

    return CompiledVoiceRules(forbidden, vocabulary, do_not)


def _compile_cta(cta_rules: CTARules) -> CompiledCTARules:
    anti_patterns = []
    for anti in cta_rules.anti_patterns:
        try:
            if anti.is_regex:
                regex = compile_pattern(anti.pattern, True, DEFAULT_FLAGS)
            else:
                regex = re.compile(re.escape(anti.pattern), re.IGNORECASE)
        except RuleCompileWarning as w:
            logger.warning("Skipping CTA anti-pattern in '%s': %s", cta_rules.name, w)
            continue
        anti_patterns.append(AntiPatternMatcher(regex, anti.is_regex, anti.reason, anti.suggestion))

    avoid_words = [ForbiddenMatcher(w, word_pattern(w)) for w in cta_rules.guidelines.avoid_words]
    return CompiledCTARules(anti_patterns, avoid_words)


def compile_voice(voice: Voice) -> CompiledVoiceRules:
    """Compiled matchers for a voice, built on first use."""
    compiled = voice._compiled
    if compiled is None:
        with _lock:
            compiled = voice._compiled
            if compiled is None:
                compiled = _compile_voice(voice)
                voice._compiled = compiled
    return compiled


def compile_cta_rules(cta_rules: CTARules) -> CompiledCTARules:
    compiled = cta_rules._compiled
    if compiled is None:
        with _lock:
            compiled = cta_rules._compiled
            if compiled is None:
                compiled = _compile_cta(cta_rules)
                cta_rules._compiled = compiled
    return compiled
