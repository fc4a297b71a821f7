"""Tests for stylepack.voice_context: content context detection and pack selection."""
import pytest
from stylepack.models import ContextualVoice, MultiVoiceConfig, VoiceMetadata
from stylepack.packs.loader import PackStore
from stylepack.voice_context import VoiceContextManager


@pytest.fixture
def store(packs_root):
    for name in ("saas", "legal", "sales"):
        (packs_root / name).mkdir()
    return PackStore(packs_root)


@pytest.fixture
def manager(store):
    config = MultiVoiceConfig(
        default_pack="saas",
        context_packs=[ContextualVoice(context="legal", pack_name="legal")],
    )
    return VoiceContextManager(config, store)


# ── detect_context ──────────────────────────────────────────────────
class TestDetectContext:
    def test_legal_keywords(self, manager):
        assert manager.detect_context("Please review our terms of service and GDPR policy.") == "legal"

    def test_sales_keywords(self, manager):
        assert manager.detect_context("Check our pricing and start a free trial today.") == "sales"

    def test_channel_wins_over_keywords(self, manager):
        assert manager.detect_context("Our privacy policy changed.", {"channel": "email"}) == "email"

    def test_social_channel(self, manager):
        assert manager.detect_context("New post", {"channel": "LinkedIn"}) == "social"

    def test_blog_content_type(self, manager):
        assert manager.detect_context("Thoughts", VoiceMetadata(content_type="article")) == "blog"

    def test_subject_keywords(self, manager):
        assert manager.detect_context("See below.", {"subject": "Webinar invite"}) == "marketing"

    def test_legal_checked_before_support(self, manager):
        # "help" is a support keyword, "contract" a legal one
        assert manager.detect_context("We can help with your contract.") == "legal"

    def test_default_is_email(self, manager):
        assert manager.detect_context("Hello there.") == "email"

    def test_deterministic(self, manager):
        text = "Upgrade your plan for the new feature launch."
        assert len({manager.detect_context(text) for _ in range(5)}) == 1


# ── select_voice ────────────────────────────────────────────────────
class TestSelectVoice:
    def test_preferred_pack(self, manager):
        selection = manager.select_voice("Hello there.", {"preferred_pack": "sales"})
        assert selection.pack_name == "sales"
        assert selection.confidence == 1.0
        assert selection.reason == "Explicitly requested"

    def test_preferred_pack_missing_falls_through(self, manager):
        selection = manager.select_voice("Hello there.", {"preferred_pack": "ghost"})
        assert selection.pack_name == "saas"
        assert selection.confidence == 0.6

    def test_mapped_context(self, manager):
        selection = manager.select_voice("Read our terms of service.")
        assert selection.context == "legal"
        assert selection.pack_name == "legal"
        assert selection.confidence == 0.8
        assert selection.reason == "Matched context: legal"

    def test_unmapped_context_uses_default(self, manager):
        selection = manager.select_voice("See our pricing.")
        assert selection.context == "sales"
        assert selection.pack_name == "saas"
        assert selection.confidence == 0.6
        assert selection.reason == "Using default pack for context: sales"

    def test_mapped_pack_not_installed(self, store):
        config = MultiVoiceConfig(context_packs=[ContextualVoice(context="support", pack_name="helpdesk")])
        selection = VoiceContextManager(config, store).select_voice("I found a bug.")
        assert selection.pack_name == "saas"
        assert selection.confidence == 0.6

    def test_fallback_pack(self, store):
        config = MultiVoiceConfig(default_pack="saas", fallback_pack="sales")
        selection = VoiceContextManager(config, store).select_voice("Hello.")
        assert selection.pack_name == "sales"

    def test_email_channel_with_sales_mapping(self, store):
        config = MultiVoiceConfig(context_packs=[ContextualVoice(context="sales", pack_name="sales")])
        manager = VoiceContextManager(config, store)
        selection = manager.select_voice("Check our pricing.", {"channel": "email"})
        assert selection.context == "email"
        assert selection.pack_name == "saas"
        selection = manager.select_voice("Check our pricing.")
        assert selection.pack_name == "sales"
        assert selection.confidence == 0.8


# ── configuration ───────────────────────────────────────────────────
class TestConfiguration:
    def test_add_replaces_existing(self, manager):
        manager.add_context_voice(ContextualVoice(context="legal", pack_name="sales"))
        legal = [cp for cp in manager.get_config().context_packs if cp.context == "legal"]
        assert len(legal) == 1
        assert legal[0].pack_name == "sales"

    def test_remove(self, manager):
        manager.remove_context_voice("legal")
        assert manager.get_config().context_packs == []
        manager.remove_context_voice("legal")  # no error

    def test_update_config(self, manager):
        manager.update_config(default_pack="sales")
        assert manager.get_config().default_pack == "sales"
        assert len(manager.get_config().context_packs) == 1

    def test_get_config_is_a_copy(self, manager):
        config = manager.get_config()
        config.context_packs.clear()
        assert len(manager.get_config().context_packs) == 1

    def test_constructor_copies_config(self, store):
        config = MultiVoiceConfig()
        manager = VoiceContextManager(config, store)
        manager.add_context_voice(ContextualVoice(context="sales", pack_name="sales"))
        assert config.context_packs == []

    def test_list_context_mappings(self, manager):
        mappings = manager.list_context_mappings()
        assert len(mappings) == 9
        legal = [m for m in mappings if m["context"] == "legal"][0]
        assert legal["pack_name"] == "legal"
        assert legal["is_default"] is False
        email = [m for m in mappings if m["context"] == "email"][0]
        assert email["pack_name"] == "saas"
        assert email["is_default"] is True

    def test_contextual_tips(self, manager):
        assert "Include clear CTAs" in manager.get_contextual_tips("email")
        assert manager.get_contextual_tips("unknown") == []


class TestGetPack:
    def test_loads_selected_pack(self, tmp_path):
        from conftest import write_pack
        root = tmp_path / "packs"
        write_pack(root / "saas", voice={"name": "SaaS"})
        manager = VoiceContextManager(store=PackStore(root))
        pack = manager.get_pack(manager.select_voice("Hello."))
        assert pack.manifest.name == "saas"
