"""Tests for stylepack.pipelines.pack_tests: running a pack's own test cases."""
import pytest
from stylepack.pipelines.pack_tests import run_pack_tests, select_cases

VOICE = {"vocabulary": {"forbidden": ["synergy"], "rules": [{"preferred": "use", "avoid": ["utilize"]}]}}

CASES = [
    {
        "id": "clean",
        "name": "Clean copy",
        "input": "Ship faster.",
        "expect": {"pass": True, "minScore": 100},
        "tags": ["smoke"],
    },
    {
        "id": "jargon",
        "name": "Jargon",
        "input": "We utilize synergy.",
        "expect": {
            "pass": False,
            "violations": [{"rule": "vocabulary.forbidden", "severity": "error"}],
        },
        "tags": ["vocabulary"],
    },
    {
        "id": "wrong-expectation",
        "name": "Expects no vocabulary hits",
        "input": "We utilize tools.",
        "expect": {"noViolations": ["vocabulary"]},
        "tags": ["vocabulary"],
    },
]


@pytest.fixture
def pack(make_pack):
    return make_pack(voice=VOICE, tests=CASES)


class TestRunPackTests:
    def test_counts(self, pack):
        report = run_pack_tests(pack)
        assert report.total == 3
        assert report.passed == 2
        assert report.failed == 1
        failed = [o.case.id for o in report.results if not o.passed]
        assert failed == ["wrong-expectation"]

    def test_filter_by_tag(self, pack):
        report = run_pack_tests(pack, "smoke")
        assert [o.case.id for o in report.results] == ["clean"]

    def test_filter_by_id_case_insensitive(self, pack):
        report = run_pack_tests(pack, "JARG")
        assert report.total == 1
        assert report.passed == 1

    def test_severity_mismatch_fails(self, make_pack):
        case = dict(CASES[1], expect={"violations": [{"rule": "vocabulary.forbidden", "severity": "info"}]})
        report = run_pack_tests(make_pack(voice=VOICE, tests=[case]))
        assert report.failed == 1

    def test_score_bounds(self, make_pack):
        case = {"id": "s", "name": "S", "input": "We utilize tools.", "expect": {"maxScore": 80}}
        report = run_pack_tests(make_pack(voice=VOICE, tests=[case]))
        assert report.failed == 1

    def test_case_context_is_used(self, make_pack):
        pack = make_pack(
            cta_rules={"contextualRules": [{"context": "marketing", "forbidden": ["Sign up"]}]},
            tests=[{
                "id": "ctx",
                "name": "Context",
                "input": "Sign up",
                "context": {"type": "marketing"},
                "expect": {"violations": [{"rule": "cta.contextForbidden"}]},
            }],
        )
        assert run_pack_tests(pack).passed == 1

    def test_empty_suite(self, make_pack):
        report = run_pack_tests(make_pack())
        assert report.total == 0
        assert report.failed == 0

    def test_sample_pack_suite_passes(self):
        from pathlib import Path
        from stylepack.packs.loader import load_pack
        pack = load_pack(Path(__file__).parent.parent / "packs" / "saas").pack
        report = run_pack_tests(pack)
        assert report.total > 0
        assert report.failed == 0


class TestSelectCases:
    def test_no_filter_returns_all(self, pack):
        assert len(select_cases(pack.tests.tests)) == 3
