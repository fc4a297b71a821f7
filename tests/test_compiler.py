"""Tests for stylepack.lint.compiler: pattern compilation and memoization."""
import re
import pytest
from stylepack.errors import RuleCompileWarning
from stylepack.lint.compiler import compile_cta_rules, compile_pattern, compile_voice, parse_flags
from stylepack.models import CTARules, Voice


def _voice(**kwargs):
    return Voice.model_validate({"name": "v", **kwargs})


class TestParseFlags:
    def test_default_is_case_insensitive(self):
        assert parse_flags(None) & re.IGNORECASE

    def test_g_only_is_case_sensitive(self):
        assert parse_flags("g") == 0

    def test_multiline_and_dotall(self):
        assert parse_flags("ms") == re.MULTILINE | re.DOTALL

    def test_unknown_flag(self):
        with pytest.raises(ValueError):
            parse_flags("x")


class TestCompilePattern:
    def test_literal_is_escaped(self):
        regex = compile_pattern("50% off (today)", is_regex=False)
        assert regex.search("Get 50% OFF (today)!")

    def test_invalid_regex(self):
        with pytest.raises(RuleCompileWarning, match="Invalid pattern"):
            compile_pattern("([a-z", is_regex=True)

    def test_unknown_flag_is_compile_failure(self):
        with pytest.raises(RuleCompileWarning):
            compile_pattern("abc", is_regex=True, flags="gz")


class TestCompileVoice:
    def test_memoized_per_object(self):
        voice = _voice(vocabulary={"forbidden": ["synergy"]})
        assert compile_voice(voice) is compile_voice(voice)

    def test_equal_voices_compile_independently(self):
        a = _voice(vocabulary={"forbidden": ["synergy"]})
        b = _voice(vocabulary={"forbidden": ["synergy"]})
        assert compile_voice(a) is not compile_voice(b)

    def test_bad_do_not_rule_skipped(self):
        voice = _voice(doNot=[
            {"pattern": "([bad", "isRegex": True, "reason": "broken"},
            {"pattern": "going forward", "reason": "filler"},
        ])
        compiled = compile_voice(voice)
        assert [m.rule_id for m in compiled.do_not] == ["doNot.going-forward"]

    def test_regex_rule_id_uses_index(self):
        voice = _voice(doNot=[
            {"pattern": "going forward", "reason": "filler"},
            {"pattern": r"\bvery\b", "isRegex": True, "reason": "weak"},
        ])
        compiled = compile_voice(voice)
        assert [m.rule_id for m in compiled.do_not] == ["doNot.going-forward", "doNot.pattern-1"]

    def test_vocabulary_expanded_per_avoid_term(self):
        voice = _voice(vocabulary={"rules": [{"preferred": "use", "avoid": ["utilize", "leverage"]}]})
        compiled = compile_voice(voice)
        assert [m.avoid for m in compiled.vocabulary] == ["utilize", "leverage"]


class TestCompileCTARules:
    def test_memoized(self):
        rules = CTARules.model_validate({
            "name": "c",
            "antiPatterns": [{"pattern": "click here", "reason": "vague"}],
        })
        assert compile_cta_rules(rules) is compile_cta_rules(rules)

    def test_bad_anti_pattern_skipped(self):
        rules = CTARules.model_validate({
            "name": "c",
            "antiPatterns": [
                {"pattern": "(oops", "isRegex": True, "reason": "broken"},
                {"pattern": "Learn more", "reason": "vague"},
            ],
        })
        compiled = compile_cta_rules(rules)
        assert len(compiled.anti_patterns) == 1
