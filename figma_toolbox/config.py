"""
Конфигурация сервера.
"""
import os
from dataclasses import dataclass
from dotenv import load_dotenv
load_dotenv()

@dataclass
class FigmaConfig:
    """Конфигурация Figma API (токены передаются в каждом вызове инструмента)."""
    base_url: str = "https://api.figma.com/v1"
    timeout: int = 30

    @classmethod
    def from_env(cls) -> "FigmaConfig":
        return cls(
            base_url=os.getenv("FIGMA_API_BASE_URL", "https://api.figma.com/v1"),
            timeout=int(os.getenv("FIGMA_REQUEST_TIMEOUT", "30"))
        )

@dataclass
class ServerConfig:
    """Конфигурация сервера."""
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "ServerConfig":
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper()
        )

@dataclass
class DownloadConfig:
    """Параметры выгрузки изображений."""
    default_png_scale: float = 2.0

    @classmethod
    def from_env(cls) -> "DownloadConfig":
        return cls(
            default_png_scale=float(os.getenv("DEFAULT_PNG_SCALE", "2"))
        )

class Config:
    """Главный класс конфигурации."""

    def __init__(self):
        self.figma = FigmaConfig.from_env()
        self.server = ServerConfig.from_env()
        self.download = DownloadConfig.from_env()

config = Config()
