"""
Запись скачанных изображений и чтение их размеров.
"""
import logging
import os
import re
import xml.etree.ElementTree as ET
from io import BytesIO
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

_SVG_LENGTH = re.compile(r'^\s*([\d.]+)\s*(px)?\s*$')


def _parse_svg_length(value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    match = _SVG_LENGTH.match(value)
    if not match:
        return None
    return round(float(match.group(1)))


def _svg_dimensions(data: bytes) -> Tuple[int, int]:
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        logger.warning(f"Failed to parse SVG: {e}")
        return 0, 0

    width = _parse_svg_length(root.get("width"))
    height = _parse_svg_length(root.get("height"))
    if width is not None and height is not None:
        return width, height

    view_box = (root.get("viewBox") or "").replace(",", " ").split()
    if len(view_box) == 4:
        try:
            return round(float(view_box[2])), round(float(view_box[3]))
        except ValueError:
            pass
    return 0, 0


def read_dimensions(data: bytes, file_name: str) -> Tuple[int, int]:
    """Возвращает (ширина, высота); (0, 0) если размер определить не удалось."""
    if file_name.lower().endswith(".svg"):
        return _svg_dimensions(data)

    try:
        with Image.open(BytesIO(data)) as img:
            return img.size
    except (UnidentifiedImageError, OSError) as e:
        logger.warning(f"Failed to read dimensions of {file_name}: {e}")
        return 0, 0


def css_variables(width: int, height: int) -> str:
    return f"--original-width: {width}px; --original-height: {height}px;"


def write_image(local_path: str, file_name: str, data: bytes) -> str:
    """Сохраняет байты изображения, создавая директорию при необходимости."""
    os.makedirs(local_path, exist_ok=True)
    file_path = os.path.join(local_path, file_name)
    with open(file_path, 'wb') as f:
        f.write(data)
    return file_path
