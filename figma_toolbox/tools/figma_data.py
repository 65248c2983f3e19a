"""
Инструменты получения сырых данных Figma.
"""
import json
import logging
import time
from typing import Annotated, Any, Awaitable, List, Literal, Optional
from pydantic import Field
from ..mcp_instance import mcp
from ..metrics import TOOL_CALLS_TOTAL, TOOL_CALL_DURATION
from ..figma_client import get_figma_service
from ..models import RenderOptions

logger = logging.getLogger(__name__)


async def _json_result(tool_name: str, call: Awaitable[Any]) -> str:
    """Ждет ответ Figma, пишет метрики и возвращает JSON с отступом 2."""
    start_time = time.time()
    try:
        result = await call
    except Exception:
        TOOL_CALLS_TOTAL.labels(tool_name=tool_name, status="error").inc()
        raise

    TOOL_CALL_DURATION.labels(tool_name=tool_name).observe(time.time() - start_time)
    TOOL_CALLS_TOTAL.labels(tool_name=tool_name, status="success").inc()
    return json.dumps(result, indent=2, ensure_ascii=False)


@mcp.tool
async def get_raw_figma_file(
    fileKey: str,
    depth: Optional[int] = None,
    figmaApiKey: Optional[str] = None,
    figmaOAuthToken: Optional[str] = None,
    useOAuth: Optional[bool] = None
) -> str:
    """
    Возвращает сырой JSON файла Figma.

    Args:
        fileKey (str): Ключ Figma-файла из URL figma.com/(file|design)/<fileKey>/...
        depth (int, optional): Глубина обхода дерева узлов.
    """
    figma = get_figma_service(figmaApiKey, figmaOAuthToken, useOAuth)
    logger.info(f"Fetching file {fileKey} (depth={depth})")
    return await _json_result("get_raw_figma_file", figma.get_raw_file(fileKey, depth))


@mcp.tool
async def get_raw_figma_node(
    fileKey: str,
    nodeId: str,
    depth: Optional[int] = None,
    figmaApiKey: Optional[str] = None,
    figmaOAuthToken: Optional[str] = None,
    useOAuth: Optional[bool] = None
) -> str:
    """Возвращает сырой JSON узла Figma."""
    figma = get_figma_service(figmaApiKey, figmaOAuthToken, useOAuth)
    logger.info(f"Fetching node {nodeId} of {fileKey} (depth={depth})")
    return await _json_result("get_raw_figma_node", figma.get_raw_node(fileKey, nodeId, depth))


@mcp.tool
async def get_figma_image_fill_urls(
    fileKey: str,
    figmaApiKey: Optional[str] = None,
    figmaOAuthToken: Optional[str] = None,
    useOAuth: Optional[bool] = None
) -> str:
    """Возвращает ссылки на картинки (image fills) файла: imageRef -> URL."""
    figma = get_figma_service(figmaApiKey, figmaOAuthToken, useOAuth)
    return await _json_result("get_figma_image_fill_urls", figma.get_image_fill_urls(fileKey))


@mcp.tool
async def get_figma_node_render_urls(
    fileKey: str,
    nodeIds: Annotated[List[str], Field(min_length=1)],
    format: Literal["png", "svg"],
    options: Optional[RenderOptions] = None,
    figmaApiKey: Optional[str] = None,
    figmaOAuthToken: Optional[str] = None,
    useOAuth: Optional[bool] = None
) -> str:
    """
    Рендерит узлы в PNG или SVG и возвращает ссылки на результат.

    Args:
        fileKey (str): Ключ Figma-файла.
        nodeIds (List[str]): ID узлов, хотя бы один.
        format (str): png или svg.
        options (RenderOptions, optional): pngScale и svgOptions.
    """
    figma = get_figma_service(figmaApiKey, figmaOAuthToken, useOAuth)
    render_options = options.model_dump(exclude_none=True) if options else {}
    return await _json_result(
        "get_figma_node_render_urls",
        figma.get_node_render_urls(fileKey, nodeIds, format, render_options),
    )
