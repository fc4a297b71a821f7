from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Global settings from .env and environment."""

    packs_root: Path = Path("./packs")
    default_pack: str = "saas"
    cache_ttl_seconds: float = 60.0
    cache_max_entries: int = 20
    log_level: str = "WARNING"

    class Config:
        env_file = ".env"
        env_prefix = "STYLEPACK_"
        case_sensitive = False

    def validate_packs_root(self):
        """Ensure the packs root points at a directory."""
        if not self.packs_root.exists():
            raise ValueError(f"Packs root does not exist: {self.packs_root}")
        if not self.packs_root.is_dir():
            raise ValueError(f"Packs root is not a directory: {self.packs_root}")


settings = Settings()
