"""Tests for stylepack.config: Settings management."""
import pytest
from pathlib import Path
from stylepack.config import Settings


class TestSettings:
    def test_defaults(self):
        s = Settings(_env_file=None)
        assert s.packs_root == Path("./packs")
        assert s.default_pack == "saas"
        assert s.cache_ttl_seconds == 60.0
        assert s.cache_max_entries == 20
        assert s.log_level == "WARNING"

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("STYLEPACK_DEFAULT_PACK", "legal")
        monkeypatch.setenv("STYLEPACK_CACHE_TTL_SECONDS", "5")
        s = Settings(_env_file=None)
        assert s.default_pack == "legal"
        assert s.cache_ttl_seconds == 5.0

    def test_validate_packs_root_missing(self, tmp_path):
        s = Settings(_env_file=None, packs_root=tmp_path / "nope")
        with pytest.raises(ValueError, match="does not exist"):
            s.validate_packs_root()

    def test_validate_packs_root_not_a_directory(self, tmp_path):
        f = tmp_path / "packs"
        f.write_text("")
        s = Settings(_env_file=None, packs_root=f)
        with pytest.raises(ValueError, match="not a directory"):
            s.validate_packs_root()

    def test_validate_packs_root_ok(self, tmp_path):
        s = Settings(_env_file=None, packs_root=tmp_path)
        s.validate_packs_root()  # should not raise
