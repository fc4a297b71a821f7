import json
import pytest
import yaml
from stylepack.models import (
    CopyPatterns,
    CTARules,
    Pack,
    PackManifest,
    PackTestSuite,
    Tokens,
    Voice,
)


def build_pack(voice=None, cta_rules=None, config=None, tests=None, name="test"):
    """In-memory pack from camelCase dicts, as they would appear on disk."""
    return Pack(
        manifest=PackManifest.model_validate(
            {"name": name, "version": "1.0.0", "config": config or {}}
        ),
        voice=Voice.model_validate({"name": f"{name} voice", **(voice or {})}),
        copy_patterns=CopyPatterns(name=f"{name} patterns"),
        cta_rules=CTARules.model_validate({"name": f"{name} CTAs", **(cta_rules or {})}),
        tokens=Tokens(),
        tests=PackTestSuite.model_validate({"name": f"{name} tests", "tests": tests or []}),
    )


def write_pack(pack_dir, manifest=None, voice=None, cta_rules=None, tests=None, tokens=None):
    """Write a pack directory. Components left as None are not written."""
    pack_dir.mkdir(parents=True, exist_ok=True)
    manifest = manifest if manifest is not None else {"name": pack_dir.name, "version": "1.0.0"}
    with open(pack_dir / "manifest.yaml", "w") as f:
        yaml.dump(manifest, f)
    for filename, data in (
        ("voice.yaml", voice),
        ("cta_rules.yaml", cta_rules),
        ("tests.yaml", tests),
    ):
        if data is not None:
            with open(pack_dir / filename, "w") as f:
                yaml.dump(data, f)
    if tokens is not None:
        (pack_dir / "tokens.json").write_text(json.dumps(tokens))
    (pack_dir / "copy_patterns.yaml").write_text(
        yaml.dump({"name": "patterns", "patterns": []})
    )
    return pack_dir


@pytest.fixture
def make_pack():
    return build_pack


@pytest.fixture
def packs_root(tmp_path):
    root = tmp_path / "packs"
    root.mkdir()
    return root
