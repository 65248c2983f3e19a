"""
Инструмент выгрузки изображений из Figma на диск.
"""
import logging
import os
import time
from typing import Annotated, List, Optional, Sequence
from pydantic import Field
from ..config import config
from ..mcp_instance import mcp
from ..metrics import TOOL_CALLS_TOTAL, TOOL_CALL_DURATION
from ..download_planner import DownloadPlan, plan_downloads
from ..figma_client import DownloadResult, get_figma_service
from ..models import ExportRequestParams

logger = logging.getLogger(__name__)


def format_download_summary(results: Sequence[Optional[DownloadResult]], plan: DownloadPlan) -> str:
    """
    Формирует текстовый отчет: одна строка на успешную операцию.

    Имена, запрошенные для той же операции, перечисляются как
    "also requested as".
    """
    lines = []
    for index, result in enumerate(results):
        if result is None:
            continue

        file_name = os.path.basename(result.file_path) or result.file_path
        dimensions = f"{result.width}x{result.height}"
        dimension_info = f"{dimensions} | {result.css_variables}" if result.css_variables else dimensions
        crop_status = " (cropped)" if result.was_cropped else ""

        aliases = [name for name in plan.aliases_for(index) if name != file_name]
        alias_text = f" (also requested as: {', '.join(aliases)})" if aliases else ""

        lines.append(f"- {file_name}: {dimension_info}{crop_status}{alias_text}")

    return f"Downloaded {len(lines)} images:\n" + "\n".join(lines)


@mcp.tool
async def download_figma_images(
    fileKey: str,
    nodes: Annotated[List[ExportRequestParams], Field(min_length=1)],
    localPath: str,
    pngScale: Annotated[float, Field(gt=0)] = config.download.default_png_scale,
    figmaApiKey: Optional[str] = None,
    figmaOAuthToken: Optional[str] = None,
    useOAuth: Optional[bool] = None
) -> str:
    """
    Скачивает PNG/SVG изображения узлов и image fills Figma в локальную директорию.

    Одинаковые imageRef без filenameSuffix скачиваются один раз, остальные
    имена возвращаются как алиасы.

    Args:
        fileKey (str): Ключ Figma-файла.
        nodes (List[ExportRequestParams]): Запрошенные изображения.
        localPath (str): Абсолютный путь директории для сохранения; создается при отсутствии.
        pngScale (float): Масштаб PNG-экспорта, по умолчанию 2.

    Returns:
        str: Отчет о скачанных изображениях.
    """
    start_time = time.time()

    plan = plan_downloads([node.to_export() for node in nodes])
    logger.info(
        f"Downloading {len(plan.operations)} images for {len(nodes)} requests from {fileKey} to {localPath}"
    )

    figma = get_figma_service(figmaApiKey, figmaOAuthToken, useOAuth)
    try:
        results = await figma.download_images(fileKey, localPath, plan.operations, png_scale=pngScale)
    except Exception as e:
        TOOL_CALLS_TOTAL.labels(tool_name="download_figma_images", status="error").inc()
        logger.error(f"Image download from {fileKey} failed: {e}")
        raise

    summary = format_download_summary(results, plan)

    TOOL_CALL_DURATION.labels(tool_name="download_figma_images").observe(time.time() - start_time)
    TOOL_CALLS_TOTAL.labels(tool_name="download_figma_images", status="success").inc()
    return summary
