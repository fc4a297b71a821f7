import uuid
from typing import Optional, List, Dict, Any, Literal
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from pydantic.alias_generators import to_camel


Severity = Literal["error", "warning", "info"]
ContractionPolicy = Literal["required", "encouraged", "allowed", "discouraged", "forbidden"]
VoiceContext = Literal[
    "email", "blog", "social", "marketing", "support",
    "legal", "internal", "product", "sales",
]

SEVERITIES = ("error", "warning", "info")
VOICE_CONTEXTS = (
    "email", "blog", "social", "marketing", "support",
    "legal", "internal", "product", "sales",
)


class PackModel(BaseModel):
    """Base for pack file schemas: camelCase on disk, snake_case in code."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FrozenPackModel(PackModel):
    """A loaded pack file. Read-only once validated."""
    model_config = ConfigDict(frozen=True)


# ── manifest ────────────────────────────────────────────────────────
class PackFiles(PackModel):
    voice: str = "voice.yaml"
    copy_patterns: str = "copy_patterns.yaml"
    cta_rules: str = "cta_rules.yaml"
    tokens: str = "tokens.json"
    tests: str = "tests.yaml"


class PackConfig(PackModel):
    strict_mode: bool = False
    min_score: int = Field(70, ge=0, le=100)
    vocabulary_severity: Severity = "error"


class PackManifest(FrozenPackModel):
    name: str
    version: str
    description: Optional[str] = None
    files: PackFiles = Field(default_factory=PackFiles)
    pack_config: PackConfig = Field(default_factory=PackConfig, alias="config")


# ── voice ───────────────────────────────────────────────────────────
class ToneAttribute(PackModel):
    name: str
    weight: float = Field(0.5, ge=0, le=1)
    description: Optional[str] = None


class Tone(PackModel):
    attributes: List[ToneAttribute] = Field(default_factory=list)
    summary: Optional[str] = None


class VocabularyRule(PackModel):
    """Use `preferred` instead of any of the `avoid` terms."""
    preferred: str
    avoid: List[str] = Field(min_length=1)
    context: Optional[str] = None
    severity: Optional[Severity] = None


class Vocabulary(PackModel):
    rules: List[VocabularyRule] = Field(default_factory=list)
    forbidden: List[str] = Field(default_factory=list)
    encouraged: List[str] = Field(default_factory=list)


class DoNotRule(PackModel):
    """A literal or regex pattern that compliant text should not contain."""
    pattern: str
    is_regex: bool = False
    reason: str
    severity: Severity = "warning"
    suggestion: Optional[str] = None
    exceptions: Optional[List[str]] = None
    regex_flags: Optional[str] = None


class Example(PackModel):
    bad: str
    good: str
    explanation: Optional[str] = None
    context: Optional[str] = None


class Constraints(PackModel):
    max_sentence_length: Optional[int] = Field(None, gt=0)
    max_paragraph_length: Optional[int] = Field(None, gt=0)
    reading_level: Optional[str] = None
    person_pov: Optional[str] = None
    contractions: ContractionPolicy = "allowed"
    oxford_comma: bool = True


class Voice(FrozenPackModel):
    version: str = "1.0"
    name: str
    description: Optional[str] = None
    tone: Tone = Field(default_factory=Tone)
    vocabulary: Vocabulary = Field(default_factory=Vocabulary)
    do_not: List[DoNotRule] = Field(default_factory=list)
    examples: List[Example] = Field(default_factory=list)
    constraints: Constraints = Field(default_factory=Constraints)

    _compiled: Any = PrivateAttr(default=None)


# ── copy patterns ───────────────────────────────────────────────────
class CopyPattern(PackModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str
    name: Optional[str] = None
    description: Optional[str] = None
    template: Optional[str] = None
    examples: List[str] = Field(default_factory=list)


class CopyPatterns(FrozenPackModel):
    version: str = "1.0"
    name: str
    patterns: List[CopyPattern] = Field(default_factory=list)


# ── CTA rules ───────────────────────────────────────────────────────
class CTAGuidelines(PackModel):
    verb_style: Optional[str] = None
    max_words: Optional[int] = Field(None, gt=0)
    capitalization: Optional[Literal["sentence", "title", "upper", "lower"]] = None
    avoid_words: List[str] = Field(default_factory=list)
    prefer_words: List[str] = Field(default_factory=list)


class CTA(PackModel):
    id: str
    text: str
    context: List[str] = Field(default_factory=list)
    priority: Optional[str] = None


class CTACategory(PackModel):
    name: str
    description: Optional[str] = None
    ctas: List[CTA] = Field(default_factory=list)


class CTAAntiPattern(PackModel):
    pattern: str
    is_regex: bool = False
    reason: str
    suggestion: Optional[str] = None


class CTAContextualRule(PackModel):
    context: str
    preferred: List[str] = Field(default_factory=list)
    forbidden: List[str] = Field(default_factory=list)


class CTARules(FrozenPackModel):
    version: str = "1.0"
    name: str
    description: Optional[str] = None
    guidelines: CTAGuidelines = Field(default_factory=CTAGuidelines)
    categories: List[CTACategory] = Field(default_factory=list)
    anti_patterns: List[CTAAntiPattern] = Field(default_factory=list)
    contextual_rules: List[CTAContextualRule] = Field(default_factory=list)

    _compiled: Any = PrivateAttr(default=None)


# ── tokens ──────────────────────────────────────────────────────────
class Tokens(FrozenPackModel):
    name: Optional[str] = None
    colors: Dict[str, Any] = Field(default_factory=dict)
    typography: Dict[str, Any] = Field(default_factory=dict)
    spacing: Dict[str, Any] = Field(default_factory=dict)
    effects: Dict[str, Any] = Field(default_factory=dict)


# ── pack tests ──────────────────────────────────────────────────────
class ValidationContext(PackModel):
    """Where the text will appear; drives CTA and contextual rules."""
    type: Optional[Literal["ui-copy", "marketing", "docs", "support", "general"]] = None
    component: Optional[str] = None


class ExpectedViolation(PackModel):
    rule: str
    severity: Optional[Severity] = None


class PackTestExpectation(PackModel):
    pass_: Optional[bool] = Field(None, alias="pass")
    min_score: Optional[int] = None
    max_score: Optional[int] = None
    violations: Optional[List[ExpectedViolation]] = None
    no_violations: Optional[List[str]] = None


class PackTestCase(PackModel):
    id: str
    name: str
    input: str
    context: Optional[ValidationContext] = None
    expect: PackTestExpectation = Field(default_factory=PackTestExpectation)
    tags: List[str] = Field(default_factory=list)


class PackTestSuite(FrozenPackModel):
    version: str = "1.0"
    name: str
    tests: List[PackTestCase] = Field(default_factory=list)


# ── pack ────────────────────────────────────────────────────────────
class Pack(FrozenPackModel):
    """A loaded, schema-validated style pack."""
    manifest: PackManifest
    voice: Voice
    copy_patterns: CopyPatterns
    cta_rules: CTARules
    tokens: Tokens
    tests: PackTestSuite


class PackLoadResult(BaseModel):
    pack: Pack
    errors: List[str] = Field(default_factory=list)
    cached: bool = False


# ── results ─────────────────────────────────────────────────────────
class Position(PackModel):
    start: int
    end: int


def _violation_id() -> str:
    return f"v-{uuid.uuid4().hex[:12]}"


class Violation(PackModel):
    """A single rule breach found in validated text."""
    id: str = Field(default_factory=_violation_id)
    rule: str
    severity: Severity
    message: str
    text: Optional[str] = None
    position: Optional[Position] = None
    suggestion: Optional[str] = None
    fixable: bool = False


class Summary(PackModel):
    errors: int = 0
    warnings: int = 0
    info: int = 0


class ResultMetadata(PackModel):
    pack_name: str
    pack_version: str
    validated_at: str


class ValidationResult(PackModel):
    score: int = Field(ge=0, le=100)
    valid: bool
    violations: List[Violation] = Field(default_factory=list)
    summary: Summary = Field(default_factory=Summary)
    metadata: ResultMetadata


class Change(PackModel):
    type: str
    original: str
    replacement: str
    reason: str
    position: Position


class ScoreDelta(PackModel):
    before: int
    after: int


class RewriteResult(PackModel):
    original: str
    rewritten: str
    changes: List[Change] = Field(default_factory=list)
    score: ScoreDelta


class VoiceMetadata(PackModel):
    channel: Optional[str] = None
    subject: Optional[str] = None
    audience: Optional[str] = None
    content_type: Optional[str] = None
    preferred_pack: Optional[str] = None


class ContextualVoice(PackModel):
    context: VoiceContext
    pack_name: str
    description: Optional[str] = None


class MultiVoiceConfig(PackModel):
    default_pack: str = "saas"
    context_packs: List[ContextualVoice] = Field(default_factory=list)
    fallback_pack: Optional[str] = None


class VoiceSelection(PackModel):
    pack_name: str
    context: VoiceContext
    confidence: float = Field(ge=0, le=1)
    reason: str
