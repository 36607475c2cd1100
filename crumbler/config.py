"""
Configuration management for the Crumbler pipeline.

Loads settings from environment variables with sensible defaults.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Tuple
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


@dataclass
class InputConfig:
    """Input validation configuration."""
    # 50 MiB
    max_file_size: int = field(
        default_factory=lambda: int(os.getenv("CRUMBLER_MAX_FILE_SIZE", str(50 * 1024 * 1024)))
    )

    # Closed allow-list, compared case-insensitively
    supported_extensions: Tuple[str, ...] = (
        ".txt", ".html", ".xml", ".md", ".markdown", ".pdf", ".mp3", ".wav"
    )

    # Extensions whose content is parsed as markup/plain text
    markup_extensions: Tuple[str, ...] = (".txt", ".html", ".xml", ".md", ".markdown")
    pdf_extensions: Tuple[str, ...] = (".pdf",)
    audio_extensions: Tuple[str, ...] = (".mp3", ".wav")

    # Candidate encodings tried after UTF-8 when decoding source bytes
    fallback_encodings: Tuple[str, ...] = ("utf-8", "windows-1252", "iso-8859-1")


@dataclass
class LanguageConfig:
    """Language code to NLP model mapping."""
    models: Dict[str, str] = field(default_factory=lambda: {
        "EN": os.getenv("CRUMBLER_EN_MODEL", "en_core_web_lg"),
        "DE": os.getenv("CRUMBLER_DE_MODEL", "de_core_news_lg"),
    })
    default_language: str = field(
        default_factory=lambda: os.getenv("CRUMBLER_LANGUAGE", "EN").upper()
    )

    def is_supported(self, language: str) -> bool:
        return bool(language) and language.upper() in self.models


@dataclass
class OutputConfig:
    """Workspace and fetch configuration."""
    output_directory: str = field(
        default_factory=lambda: os.getenv("CRUMBLER_OUTPUT_DIR", "output")
    )
    fetch_timeout: float = field(
        default_factory=lambda: float(os.getenv("CRUMBLER_FETCH_TIMEOUT", "30"))
    )
    user_agent: str = "Crumbler/1.0"


@dataclass
class LoggingConfig:
    """Log file configuration."""
    log_dir: str = field(default_factory=lambda: os.getenv("CRUMBLER_LOG_DIR", "log"))
    environment: str = field(
        default_factory=lambda: os.getenv("CRUMBLER_ENV", "development").lower()
    )
    # 2 MiB per file, 100 rotated files
    max_bytes: int = 2 * 1024 * 1024
    backup_count: int = 100


@dataclass
class PipelineConfig:
    """Main pipeline configuration combining all settings."""
    input: InputConfig = field(default_factory=InputConfig)
    language: LanguageConfig = field(default_factory=LanguageConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Pipeline version
    version: str = "1.0.0"


# Global config instance
config = PipelineConfig()
