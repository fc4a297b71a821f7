import json
import logging
import os
import yaml
from pathlib import Path
from typing import Any, Callable, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel

from stylepack.config import settings
from stylepack.errors import PackComponentWarning, PackLoadError
from stylepack.models import (
    CopyPatterns,
    CTARules,
    Pack,
    PackLoadResult,
    PackManifest,
    PackTestSuite,
    Tokens,
    Voice,
)
from stylepack.packs.cache import PackCache

logger = logging.getLogger(__name__)

MANIFEST_FILE = "manifest.yaml"

M = TypeVar("M", bound=BaseModel)


def _read_yaml(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def _read_json(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def default_voice() -> Voice:
    return Voice(name="default")


def default_copy_patterns() -> CopyPatterns:
    return CopyPatterns(name="default")


def default_cta_rules() -> CTARules:
    return CTARules(name="default")


def default_tokens() -> Tokens:
    return Tokens(name="default")


def default_tests() -> PackTestSuite:
    return PackTestSuite(name="default")


# (label, files attribute, schema, reader, default factory)
COMPONENTS = (
    ("voice", "voice", Voice, _read_yaml, default_voice),
    ("copy patterns", "copy_patterns", CopyPatterns, _read_yaml, default_copy_patterns),
    ("CTA rules", "cta_rules", CTARules, _read_yaml, default_cta_rules),
    ("tokens", "tokens", Tokens, _read_json, default_tokens),
    ("tests", "tests", PackTestSuite, _read_yaml, default_tests),
)


def load_manifest(pack_path: Path) -> PackManifest:
    """Load and validate a pack manifest. Any failure is fatal."""
    manifest_path = pack_path / MANIFEST_FILE
    try:
        data = _read_yaml(manifest_path)
        return PackManifest.model_validate(data)
    except (OSError, ValueError, yaml.YAMLError) as e:
        # covers pydantic ValidationError and undecodable bytes
        raise PackLoadError(f"Failed to load manifest: {e}") from e


def load_component(
    pack_path: Path,
    label: str,
    filename: str,
    schema: Type[M],
    reader: Callable[[Path], Any],
) -> M:
    """Load one component file, raising PackComponentWarning on failure."""
    root = pack_path.resolve()
    path = (pack_path / filename).resolve()
    if root != path and root not in path.parents:
        raise PackComponentWarning(label, f"path escapes pack directory: {filename}")

    try:
        data = reader(path)
        return schema.model_validate(data)
    except (OSError, ValueError, yaml.YAMLError) as e:
        # pydantic's ValidationError and json's JSONDecodeError are ValueErrors
        raise PackComponentWarning(label, str(e)) from e


def manifest_mtime(pack_path: Path) -> int:
    try:
        return os.stat(pack_path / MANIFEST_FILE).st_mtime_ns
    except OSError as e:
        raise PackLoadError(f"Failed to load manifest: {e}") from e


def _read_pack(pack_path: Path) -> PackLoadResult:
    manifest = load_manifest(pack_path)
    errors: List[str] = []
    components = {}

    for label, attr, schema, reader, make_default in COMPONENTS:
        filename = getattr(manifest.files, attr)
        try:
            components[attr] = load_component(pack_path, label, filename, schema, reader)
        except PackComponentWarning as w:
            logger.warning("Pack '%s': %s", manifest.name, w)
            errors.append(str(w))
            components[attr] = make_default()

    pack = Pack(manifest=manifest, **components)
    return PackLoadResult(pack=pack, errors=errors)


def load_pack(
    pack_path: Union[str, Path],
    no_cache: bool = False,
    cache: Optional[PackCache] = None,
) -> PackLoadResult:
    """Load a pack directory, reusing a cached copy when it is still fresh.

    A broken manifest raises PackLoadError. Broken component files are
    reported in `errors` and replaced with empty defaults, so the returned
    pack is always usable.
    """
    pack_path = Path(pack_path)
    key = str(pack_path.resolve())

    if cache is None or no_cache:
        return _read_pack(pack_path)

    mtime = manifest_mtime(pack_path)
    hit = cache.get(key, mtime)
    if hit is not None:
        pack, errors = hit
        logger.debug("Pack cache hit for %s", key)
        return PackLoadResult(pack=pack, errors=errors, cached=True)

    result = _read_pack(pack_path)
    cache.set(key, result.pack, result.errors, mtime)
    return result


def get_packs_directory() -> Path:
    return settings.packs_root


def list_available_packs(packs_root: Optional[Path] = None) -> List[str]:
    """Names of the immediate subdirectories of the packs root."""
    root = Path(packs_root) if packs_root is not None else get_packs_directory()
    try:
        return sorted(p.name for p in root.iterdir() if p.is_dir())
    except OSError:
        return []


class PackStore:
    """Loads packs by name from a packs root through a shared cache."""

    def __init__(self, packs_root: Optional[Path] = None, cache: Optional[PackCache] = None):
        self.packs_root = Path(packs_root) if packs_root is not None else get_packs_directory()
        self.cache = cache if cache is not None else PackCache(
            ttl_seconds=settings.cache_ttl_seconds,
            max_entries=settings.cache_max_entries,
        )

    def list_available_packs(self) -> List[str]:
        return list_available_packs(self.packs_root)

    def resolve(self, name: str) -> Path:
        """Map a pack name to its directory. Only listed packs are accepted."""
        if name not in self.list_available_packs():
            raise PackLoadError(f"Pack not found: {name}")
        return self.packs_root / name

    def load(self, name: Union[str, Path], no_cache: bool = False) -> PackLoadResult:
        """Load a pack by name, or from an explicit directory given as a Path."""
        pack_path = name if isinstance(name, Path) else self.resolve(name)
        return load_pack(pack_path, no_cache=no_cache, cache=self.cache)

    def invalidate(self, name: str) -> None:
        self.cache.invalidate(str((self.packs_root / name).resolve()))
