import json
import socket
import threading
import time
import httpx
import pytest
import uvicorn
from fastmcp import Client
from starlette.testclient import TestClient

from figma_toolbox.config import Config
from figma_toolbox.server import SSE_PATH, STREAMABLE_HTTP_PATH, create_app

INITIALIZE_REQUEST = {
    "jsonrpc": "2.0",
    "id": 1,
    "method": "initialize",
    "params": {
        "protocolVersion": "2025-03-26",
        "capabilities": {},
        "clientInfo": {"name": "test", "version": "0"},
    },
}


@pytest.fixture
def live_server():
    """Поднимает приложение в uvicorn на свободном порту"""
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]

    server = uvicorn.Server(uvicorn.Config(
        create_app(), host="127.0.0.1", port=port, log_level="warning", timeout_graceful_shutdown=1
    ))
    thread = threading.Thread(target=server.run, daemon=True)
    thread.start()

    deadline = time.time() + 10
    while not server.started:
        if time.time() > deadline:
            raise RuntimeError("uvicorn did not start")
        time.sleep(0.05)

    yield f"http://127.0.0.1:{port}"

    server.should_exit = True
    thread.join(timeout=5)


class TestTransportRouting:
    """Тесты маршрутизации двух транспортов"""

    def test_both_transports_mounted(self):
        app = create_app()
        paths = {getattr(route, "path", None) for route in app.routes}

        assert STREAMABLE_HTTP_PATH in paths
        assert SSE_PATH in paths

    @pytest.mark.parametrize("path", ["/", "/unknown", "/mcpx", "/health"])
    def test_other_paths_not_found(self, path):
        client = TestClient(create_app())

        assert client.get(path).status_code == 404


class TestServerRegistry:
    """Тесты реестра инструментов и ресурсов"""

    @pytest.mark.asyncio
    async def test_all_tools_registered(self, mcp_server):
        async with Client(mcp_server) as client:
            tools = await client.list_tools()

        assert {tool.name for tool in tools} == {
            "add",
            "calculate",
            "get_raw_figma_file",
            "get_raw_figma_node",
            "get_figma_image_fill_urls",
            "get_figma_node_render_urls",
            "download_figma_images",
        }

    @pytest.mark.asyncio
    async def test_health_resource(self, mcp_server):
        async with Client(mcp_server) as client:
            contents = await client.read_resource("health://check")

        assert json.loads(contents[0].text)["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_metrics_resource(self, mcp_server):
        async with Client(mcp_server) as client:
            await client.call_tool("add", {"a": 1, "b": 1})
            contents = await client.read_resource("metrics://prometheus")

        assert "tool_calls_total" in contents[0].text


def test_config_from_env(test_env_vars):
    """Тест загрузки конфигурации из окружения"""
    config = Config()

    assert config.figma.base_url == "https://figma.test/v1"
    assert config.figma.timeout == 5
    assert config.server.host == "127.0.0.1"
    assert config.server.port == 9999
    assert config.server.log_level == "DEBUG"
    assert config.download.default_png_scale == 3.0


class TestLiveTransports:
    """Тесты обоих транспортов на запущенном сервере"""

    def test_initialize_over_streamable_http(self, live_server):
        response = httpx.post(
            live_server + STREAMABLE_HTTP_PATH,
            json=INITIALIZE_REQUEST,
            headers={"Accept": "application/json, text/event-stream"},
            follow_redirects=True,
            timeout=10,
        )

        assert response.status_code == 200
        assert "Figma Toolbox Server" in response.text

    def test_sse_announces_message_endpoint(self, live_server):
        lines = []
        with httpx.stream("GET", live_server + SSE_PATH, timeout=10) as response:
            assert response.status_code == 200
            for line in response.iter_lines():
                lines.append(line)
                if line.startswith("data:"):
                    break

        assert "event: endpoint" in lines
        assert "/messages/?session_id=" in lines[-1]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", [STREAMABLE_HTTP_PATH, SSE_PATH])
    async def test_tool_call_over_transport(self, live_server, path):
        async with Client(live_server + path) as client:
            result = await client.call_tool("add", {"a": 2, "b": 3})

        assert result.content[0].text == "5"
