"""Configuration management using pydantic-settings."""

import tomllib
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PDFTK = "pdftk"
DEFAULT_METADATA_SUFFIX = ".info"
DEFAULT_TOC_SUFFIX = ".toc"
DEFAULT_BACKUP_SUFFIX = ".bak"
CONFIG_PATH = Path("~/.config/tocedit/config.toml").expanduser()


class ToolConfig(BaseSettings):
    """External metadata tool configuration."""

    model_config = SettingsConfigDict(env_prefix="TOCEDIT_TOOL_")

    pdftk: str = DEFAULT_PDFTK
    utf8: bool = True


class FilesConfig(BaseSettings):
    """Naming of the files written next to a PDF."""

    model_config = SettingsConfigDict(env_prefix="TOCEDIT_FILES_")

    metadata_suffix: str = DEFAULT_METADATA_SUFFIX
    toc_suffix: str = DEFAULT_TOC_SUFFIX
    backup_suffix: str = DEFAULT_BACKUP_SUFFIX

    @field_validator("metadata_suffix", "toc_suffix", "backup_suffix")
    @classmethod
    def require_dot(cls, v: str) -> str:
        if not v.startswith(".") or len(v) < 2:
            raise ValueError(f"suffix must start with '.': {v!r}")
        return v

    def metadata_file(self, pdf: Path) -> Path:
        return pdf.with_suffix(self.metadata_suffix)

    def toc_file(self, pdf: Path) -> Path:
        return pdf.with_suffix(self.toc_suffix)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="TOCEDIT_")

    tool: ToolConfig = ToolConfig()
    files: FilesConfig = FilesConfig()


def load_settings(config_path: Path | None = None) -> Settings:
    """Load settings from TOML file, falling back to defaults."""
    path = config_path or CONFIG_PATH

    if path.exists():
        with open(path, "rb") as f:
            data = tomllib.load(f)

        tool = ToolConfig(**data.get("tool", {}))
        files = FilesConfig(**data.get("files", {}))
        return Settings(tool=tool, files=files)

    return Settings()
