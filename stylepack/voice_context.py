"""Pick which pack applies to a piece of text.

Selection is a fixed rule cascade rather than a classifier: identical
text and metadata always produce the same context and pack.
"""
import logging
from typing import Dict, List, Optional, Union

from stylepack.models import (
    VOICE_CONTEXTS,
    ContextualVoice,
    MultiVoiceConfig,
    Pack,
    VoiceMetadata,
    VoiceSelection,
)
from stylepack.packs.loader import PackStore

logger = logging.getLogger(__name__)

EXPLICIT_CONFIDENCE = 1.0
MAPPED_CONFIDENCE = 0.8
DEFAULT_CONFIDENCE = 0.6

# Checked in this order; the first list with any hit wins.
CONTENT_INDICATORS = (
    ("legal", (
        "terms of service", "privacy policy", "legal", "disclaimer",
        "liability", "warranty", "agreement", "contract", "compliance",
        "gdpr", "ccpa", "terms and conditions", "intellectual property",
    )),
    ("support", (
        "help", "support", "issue", "problem", "bug", "error",
        "troubleshoot", "assistance", "contact us", "customer service",
        "ticket", "resolve", "solution", "how to", "faq",
    )),
    ("sales", (
        "pricing", "buy", "purchase", "sale", "discount", "offer",
        "free trial", "demo", "quote", "proposal", "upgrade",
        "plan", "package", "subscription", "billing",
    )),
    ("marketing", (
        "newsletter", "announcement", "launch", "new feature",
        "campaign", "promotion", "webinar", "event", "update",
        "introducing", "excited to share", "now available",
    )),
    ("product", (
        "feature", "functionality", "release", "version", "update",
        "changelog", "roadmap", "development", "improvement",
        "enhancement", "specification", "documentation",
    )),
    ("internal", (
        "team", "internal", "employee", "staff", "meeting",
        "memo", "hr", "onboarding", "policy", "process",
        "workflow", "project", "deadline", "status update",
    )),
)

CONTEXTUAL_TIPS: Dict[str, List[str]] = {
    "email": [
        "Use clear, actionable subject lines",
        "Keep paragraphs short for mobile reading",
        "Include clear CTAs",
        "Use personal pronouns appropriately",
    ],
    "blog": [
        "Write scannable headlines",
        "Use subheadings to break up content",
        "Include takeaways and actionable insights",
        "Optimize for SEO while maintaining voice",
    ],
    "social": [
        "Keep it concise and engaging",
        "Use platform-appropriate tone",
        "Include relevant hashtags",
        "Encourage interaction",
    ],
    "marketing": [
        "Focus on benefits over features",
        "Create urgency without pressure",
        "Use social proof",
        "Include clear value propositions",
    ],
    "support": [
        "Be empathetic and solution-focused",
        "Use clear, step-by-step instructions",
        "Acknowledge customer concerns",
        "Provide escalation paths",
    ],
    "legal": [
        "Use plain language when possible",
        "Be precise and unambiguous",
        "Include necessary disclaimers",
        "Follow compliance requirements",
    ],
    "internal": [
        "Be direct and efficient",
        "Use company-specific terminology",
        "Focus on actions and outcomes",
        "Consider company culture",
    ],
    "product": [
        "Focus on user value",
        "Use consistent terminology",
        "Be clear about functionality",
        "Consider technical audience",
    ],
    "sales": [
        "Focus on customer needs",
        "Use consultative approach",
        "Be specific about value",
        "Create trust and credibility",
    ],
}


def _as_metadata(metadata) -> VoiceMetadata:
    if metadata is None:
        return VoiceMetadata()
    if isinstance(metadata, VoiceMetadata):
        return metadata
    return VoiceMetadata.model_validate(metadata)


class VoiceContextManager:
    """Maps content to a voice context and that context to a pack."""

    def __init__(self, config: Optional[MultiVoiceConfig] = None, store: Optional[PackStore] = None):
        self.config = config.model_copy(deep=True) if config is not None else MultiVoiceConfig()
        self.store = store if store is not None else PackStore()

    def detect_context(self, text: str, metadata: Union[VoiceMetadata, dict, None] = None) -> str:
        meta = _as_metadata(metadata)
        lower_text = text.lower()
        subject = (meta.subject or "").lower()
        channel = (meta.channel or "").lower()
        content_type = (meta.content_type or "").lower()

        if "email" in channel or "email" in content_type:
            return "email"
        if any(k in channel for k in ("social", "twitter", "linkedin")):
            return "social"
        if "blog" in channel or "blog" in content_type or "article" in content_type:
            return "blog"

        for context, terms in CONTENT_INDICATORS:
            if any(term in lower_text or term in subject for term in terms):
                return context

        return "email"

    def select_voice(self, text: str, metadata: Union[VoiceMetadata, dict, None] = None) -> VoiceSelection:
        meta = _as_metadata(metadata)
        available = self.store.list_available_packs()
        context = self.detect_context(text, meta)

        if meta.preferred_pack and meta.preferred_pack in available:
            return VoiceSelection(
                pack_name=meta.preferred_pack,
                context=context,
                confidence=EXPLICIT_CONFIDENCE,
                reason="Explicitly requested",
            )

        mapped = next((cp for cp in self.config.context_packs if cp.context == context), None)
        if mapped is not None and mapped.pack_name in available:
            return VoiceSelection(
                pack_name=mapped.pack_name,
                context=context,
                confidence=MAPPED_CONFIDENCE,
                reason=f"Matched context: {context}",
            )

        if mapped is not None:
            logger.debug("Pack '%s' mapped to %s is not available", mapped.pack_name, context)

        return VoiceSelection(
            pack_name=self.config.fallback_pack or self.config.default_pack,
            context=context,
            confidence=DEFAULT_CONFIDENCE,
            reason=f"Using default pack for context: {context}",
        )

    def get_pack(self, selection: VoiceSelection) -> Pack:
        result = self.store.load(selection.pack_name)
        if result.errors:
            logger.warning("Pack '%s' loaded with warnings: %s", selection.pack_name, result.errors)
        return result.pack

    def update_config(self, **changes) -> None:
        updated = self.config.model_dump()
        updated.update(changes)
        self.config = MultiVoiceConfig.model_validate(updated)

    def add_context_voice(self, contextual_voice: ContextualVoice) -> None:
        """Assign a pack to a context, replacing any existing assignment."""
        self.remove_context_voice(contextual_voice.context)
        self.config.context_packs.append(contextual_voice)

    def remove_context_voice(self, context: str) -> None:
        self.config.context_packs = [cp for cp in self.config.context_packs if cp.context != context]

    def get_config(self) -> MultiVoiceConfig:
        return self.config.model_copy(deep=True)

    def list_context_mappings(self) -> List[dict]:
        mappings = [
            {
                "context": cp.context,
                "pack_name": cp.pack_name,
                "is_default": False,
                "description": cp.description,
            }
            for cp in self.config.context_packs
        ]
        assigned = {cp.context for cp in self.config.context_packs}
        for context in VOICE_CONTEXTS:
            if context not in assigned:
                mappings.append({
                    "context": context,
                    "pack_name": self.config.default_pack,
                    "is_default": True,
                    "description": "Falls back to default pack",
                })
        return mappings

    def get_contextual_tips(self, context: str) -> List[str]:
        return list(CONTEXTUAL_TIPS.get(context, []))
