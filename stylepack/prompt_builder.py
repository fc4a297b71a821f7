from typing import Optional, List
from stylepack.models import Pack, ValidationContext, Violation, Voice

MAX_TONE_ATTRIBUTES = 3
MAX_VOCABULARY_RULES = 10
MAX_FORBIDDEN = 15
MAX_DO_NOT_RULES = 10
MAX_VIOLATIONS = 10


class PromptBuilder:
    """Assembles prompts with clearly delineated sections."""

    def __init__(self):
        self.sections = {}

    def add_system(self, text: str) -> "PromptBuilder":
        """Add system context."""
        self.sections["SYSTEM"] = text
        return self

    def add_voice(self, voice: Voice) -> "PromptBuilder":
        """Add tone, vocabulary and do-not rules of a voice."""
        self.sections["BRAND_VOICE"] = describe_voice(voice)
        return self

    def add_context(self, context: Optional[ValidationContext]) -> "PromptBuilder":
        if context is None or (not context.type and not context.component):
            return self
        text = ""
        if context.type:
            text += f"Content type: {context.type}\n"
        if context.component:
            text += f"UI component: {context.component}\n"
        self.sections["CONTEXT"] = text
        return self

    def add_violations(self, violations: List[Violation]) -> "PromptBuilder":
        if not violations:
            self.sections["VIOLATIONS"] = "No violations found. Light revision for polish."
            return self
        text = ""
        for v in violations[:MAX_VIOLATIONS]:
            text += f"- {v.message}"
            if v.suggestion:
                text += f" (suggestion: {v.suggestion})"
            text += "\n"
        self.sections["VIOLATIONS"] = text
        return self

    def add_text(self, text: str) -> "PromptBuilder":
        self.sections["TEXT"] = f"```\n{text}\n```"
        return self

    def add_task(self, task_text: str) -> "PromptBuilder":
        """Add the generation task."""
        self.sections["TASK"] = task_text
        return self

    def build(self) -> str:
        """Assemble final prompt."""
        prompt = ""
        order = [
            "SYSTEM",
            "BRAND_VOICE",
            "CONTEXT",
            "VIOLATIONS",
            "TEXT",
            "TASK",
        ]

        for key in order:
            if key in self.sections:
                prompt += f"\n## {key}\n\n{self.sections[key]}\n"

        return prompt


def describe_voice(voice: Voice) -> str:
    """Render the parts of a voice a copy editor needs to know."""
    text = ""

    if voice.tone.summary:
        text += f"Tone: {voice.tone.summary}\n"

    if voice.tone.attributes:
        top = sorted(voice.tone.attributes, key=lambda a: a.weight, reverse=True)
        names = ", ".join(a.name for a in top[:MAX_TONE_ATTRIBUTES])
        text += f"Key attributes: {names}\n"

    if voice.vocabulary.rules:
        text += "\n### VOCABULARY RULES\n"
        for rule in voice.vocabulary.rules[:MAX_VOCABULARY_RULES]:
            text += f'- Use "{rule.preferred}" instead of: {", ".join(rule.avoid)}\n'

    if voice.vocabulary.forbidden:
        text += "\n### FORBIDDEN WORDS (never use)\n"
        text += ", ".join(voice.vocabulary.forbidden[:MAX_FORBIDDEN]) + "\n"

    if voice.do_not:
        text += "\n### PATTERNS TO AVOID\n"
        for rule in voice.do_not[:MAX_DO_NOT_RULES]:
            text += f'- "{rule.pattern}": {rule.reason}\n'
            if rule.suggestion:
                text += f"  Suggestion: {rule.suggestion}\n"

    return text


def build_rewrite_prompt(
    pack: Pack,
    text: str,
    violations: List[Violation],
    context: Optional[ValidationContext] = None,
) -> str:
    """Build a prompt asking a language model to fix the listed violations."""
    builder = PromptBuilder()
    builder.add_system(
        """You are a brand copy editor. Your job is to rewrite text to match a specific brand voice while fixing style violations.

CRITICAL:
- Fix all listed violations.
- Preserve the original meaning.
- Keep the same approximate length.
- Preserve proper nouns, technical terms and product names."""
    )
    builder.add_voice(pack.voice)
    builder.add_context(context)
    builder.add_violations(violations)
    builder.add_text(text)
    builder.add_task(
        "Rewrite the text above to fix these issues while maintaining the brand voice.\n"
        "Return ONLY the rewritten text, no explanations or preamble."
    )
    return builder.build()
