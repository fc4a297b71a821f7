import re
from typing import List

from stylepack.lint.utils import count_words, create_violation, match_case, segments, word_pattern
from stylepack.models import Constraints, Violation

SENTENCE_BREAK = re.compile(r"[.!?]+")
PARAGRAPH_BREAK = re.compile(r"\n[ \t]*\n\s*")
MISSING_OXFORD_COMMA = re.compile(r"(\w+),\s+(\w+)\s+and\s+(\w+)", re.IGNORECASE)

# (contraction, expanded form)
CONTRACTIONS = [
    ("don't", "do not"), ("doesn't", "does not"), ("didn't", "did not"),
    ("can't", "cannot"), ("couldn't", "could not"), ("won't", "will not"),
    ("wouldn't", "would not"), ("shouldn't", "should not"), ("isn't", "is not"),
    ("aren't", "are not"), ("wasn't", "was not"), ("weren't", "were not"),
    ("hasn't", "has not"), ("haven't", "have not"), ("hadn't", "had not"),
    ("it's", "it is"), ("that's", "that is"), ("what's", "what is"),
    ("who's", "who is"), ("there's", "there is"), ("here's", "here is"),
    ("let's", "let us"), ("i'm", "I am"), ("you're", "you are"),
    ("we're", "we are"), ("they're", "they are"), ("he's", "he is"),
    ("she's", "she is"), ("i'll", "I will"), ("you'll", "you will"),
    ("we'll", "we will"), ("they'll", "they will"), ("he'll", "he will"),
    ("she'll", "she will"), ("it'll", "it will"), ("i've", "I have"),
    ("you've", "you have"), ("we've", "we have"), ("they've", "they have"),
    ("i'd", "I would"), ("you'd", "you would"), ("we'd", "we would"),
    ("they'd", "they would"),
]

CONTRACTION_PATTERNS = [(word_pattern(c), c, e) for c, e in CONTRACTIONS]
EXPANDED_PATTERNS = [(word_pattern(e), c, e) for c, e in CONTRACTIONS]


def check_sentence_length(text: str, max_words: int) -> List[Violation]:
    violations = []

    for start, end, sentence in segments(text, SENTENCE_BREAK):
        words = count_words(sentence)
        if words > max_words:
            violations.append(
                create_violation(
                    "constraints.maxSentenceLength",
                    "error",
                    f"Sentence has {words} words, max is {max_words}",
                    sentence,
                    start,
                    end,
                    "Break into shorter sentences",
                )
            )

    return violations


def check_paragraph_length(text: str, max_sentences: int) -> List[Violation]:
    violations = []

    for start, end, paragraph in segments(text, PARAGRAPH_BREAK):
        sentences = sum(1 for _ in segments(paragraph, SENTENCE_BREAK))
        if sentences > max_sentences:
            violations.append(
                create_violation(
                    "constraints.maxParagraphLength",
                    "info",
                    f"Paragraph has {sentences} sentences, max is {max_sentences}",
                    paragraph,
                    start,
                    end,
                    "Break into shorter paragraphs",
                )
            )

    return violations


def check_contractions(text: str, policy: str) -> List[Violation]:
    """Flag contractions or their expanded forms depending on policy."""
    violations = []

    if policy in ("forbidden", "discouraged"):
        severity = "warning" if policy == "forbidden" else "info"
        message = "Contractions are not allowed" if policy == "forbidden" else "Contractions are discouraged"
        for regex, _, expanded in CONTRACTION_PATTERNS:
            for match in regex.finditer(text):
                violations.append(
                    create_violation(
                        "constraints.contractions",
                        severity,
                        message,
                        match.group(0),
                        match.start(),
                        match.end(),
                        match_case(match.group(0), expanded),
                        fixable=True,
                    )
                )

    elif policy in ("required", "encouraged"):
        message = (
            "Use contractions for a more natural tone"
            if policy == "required"
            else "Consider using contractions for a friendlier tone"
        )
        for regex, contraction, _ in EXPANDED_PATTERNS:
            for match in regex.finditer(text):
                violations.append(
                    create_violation(
                        "constraints.contractions",
                        "info",
                        message,
                        match.group(0),
                        match.start(),
                        match.end(),
                        match_case(match.group(0), contraction),
                        fixable=True,
                    )
                )

    return violations


def check_oxford_comma(text: str, required: bool) -> List[Violation]:
    """Flag 'A, B and C' lists when the serial comma is required."""
    violations = []
    if not required:
        return violations

    for match in MISSING_OXFORD_COMMA.finditer(text):
        first, second, third = match.groups()
        violations.append(
            create_violation(
                "constraints.oxfordComma",
                "info",
                'Use the Oxford comma before "and" in lists',
                match.group(0),
                match.start(),
                match.end(),
                f"{first}, {second}, and {third}",
                fixable=True,
            )
        )

    return violations


def check_constraints(text: str, constraints: Constraints) -> List[Violation]:
    """Run all structural constraint checks."""
    violations = []
    if constraints.max_sentence_length:
        violations.extend(check_sentence_length(text, constraints.max_sentence_length))
    if constraints.max_paragraph_length:
        violations.extend(check_paragraph_length(text, constraints.max_paragraph_length))
    violations.extend(check_contractions(text, constraints.contractions))
    violations.extend(check_oxford_comma(text, constraints.oxford_comma))
    return violations
