"""Инструменты MCP сервера Figma Toolbox."""

from .calculator import add, calculate
from .figma_data import (
    get_raw_figma_file,
    get_raw_figma_node,
    get_figma_image_fill_urls,
    get_figma_node_render_urls,
)
from .download_images import download_figma_images, format_download_summary

__all__ = [
    "add",
    "calculate",
    "get_raw_figma_file",
    "get_raw_figma_node",
    "get_figma_image_fill_urls",
    "get_figma_node_render_urls",
    "download_figma_images",
    "format_download_summary",
]
