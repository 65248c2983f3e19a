import os
import sys
from io import BytesIO
from unittest.mock import AsyncMock, Mock
import pytest
from PIL import Image

# Добавляем корень проекта в путь
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from figma_toolbox.download_planner import ImageFillExport, NodeExport
from figma_toolbox.figma_client import DownloadResult


@pytest.fixture
def mcp_server():
    """FastMCP сервер со всеми зарегистрированными инструментами"""
    from figma_toolbox.server import mcp
    return mcp


@pytest.fixture
def png_bytes():
    """PNG 4x3 для тестов скачивания"""
    buffer = BytesIO()
    Image.new("RGBA", (4, 3), (255, 0, 0, 255)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def svg_bytes():
    return b'<svg xmlns="http://www.w3.org/2000/svg" width="24" height="16"></svg>'


@pytest.fixture
def mixed_requests():
    """Два запроса одной картинки и один рендер узла"""
    return [
        ImageFillExport(image_ref="A", file_name="a.png"),
        ImageFillExport(image_ref="A", file_name="b.png"),
        NodeExport(node_id="1:2", file_name="c.png"),
    ]


@pytest.fixture
def mock_figma_service():
    """Мок FigmaService с успешным скачиванием"""
    service = Mock()
    service.download_images = AsyncMock(return_value=[
        DownloadResult(file_path="/tmp/out/a.png", width=100, height=50),
        DownloadResult(file_path="/tmp/out/c.png", width=32, height=32),
    ])
    return service


@pytest.fixture
def test_env_vars(monkeypatch):
    """Устанавливаем тестовые переменные окружения"""
    env_vars = {
        "FIGMA_API_BASE_URL": "https://figma.test/v1",
        "FIGMA_REQUEST_TIMEOUT": "5",
        "HOST": "127.0.0.1",
        "PORT": "9999",
        "LOG_LEVEL": "debug",
        "DEFAULT_PNG_SCALE": "3",
    }

    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)

    return env_vars
