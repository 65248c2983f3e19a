"""
Асинхронный клиент для работы с Figma API.
"""
import aiohttp
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple
from .config import config
from .download_planner import DownloadOperation
from .images import css_variables, read_dimensions, write_image
from .metrics import FIGMA_API_CALLS

logger = logging.getLogger(__name__)

DEFAULT_SVG_OPTIONS = {
    "outlineText": True,
    "includeId": False,
    "simplifyStroke": True,
}


class FigmaAPIError(Exception):
    """Ошибка Figma API."""
    pass


@dataclass
class DownloadResult:
    """Результат одной операции скачивания."""
    file_path: str
    width: int
    height: int
    was_cropped: bool = False
    css_variables: Optional[str] = None


class FigmaService:
    """Клиент Figma API, привязанный к учетным данным одного вызова."""

    def __init__(self, api_key: str = "", oauth_token: str = "", use_oauth: bool = False):
        self.base_url = config.figma.base_url
        self.use_oauth = use_oauth
        if use_oauth:
            self.headers = {"Authorization": f"Bearer {oauth_token}"}
        else:
            self.headers = {"X-Figma-Token": api_key}
        self.timeout = aiohttp.ClientTimeout(total=config.figma.timeout)

    async def _make_request(self, endpoint: str, path: str, params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        """Выполняет GET-запрос к Figma API."""
        url = f"{self.base_url}/{path}"

        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            try:
                async with session.get(url, headers=self.headers, params=params) as response:
                    FIGMA_API_CALLS.labels(endpoint=endpoint, status=response.status).inc()

                    if response.status != 200:
                        error_text = await response.text()
                        logger.error(f"Figma API {endpoint} failed with {response.status}")
                        raise FigmaAPIError(f"Figma API error ({response.status}): {error_text}")

                    return await response.json()

            except asyncio.TimeoutError:
                FIGMA_API_CALLS.labels(endpoint=endpoint, status="timeout").inc()
                raise FigmaAPIError("Request timeout to Figma API")
            except aiohttp.ClientError as e:
                FIGMA_API_CALLS.labels(endpoint=endpoint, status="error").inc()
                raise FigmaAPIError(f"HTTP client error: {str(e)}")

    async def _fetch_bytes(self, url: str) -> bytes:
        """Скачивает изображение по ссылке, выданной Figma."""
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            try:
                async with session.get(url) as response:
                    if response.status != 200:
                        raise FigmaAPIError(f"Image download failed ({response.status}): {url}")
                    return await response.read()
            except asyncio.TimeoutError:
                raise FigmaAPIError(f"Image download timeout: {url}")
            except aiohttp.ClientError as e:
                raise FigmaAPIError(f"Image download error: {str(e)}")

    async def get_raw_file(self, file_key: str, depth: Optional[int] = None) -> Dict[str, Any]:
        """Получает JSON файла Figma."""
        params = {"depth": str(depth)} if depth is not None else None
        return await self._make_request("files", f"files/{file_key}", params=params)

    async def get_raw_node(self, file_key: str, node_id: str, depth: Optional[int] = None) -> Dict[str, Any]:
        """Получает JSON узла Figma."""
        params = {"ids": node_id}
        if depth is not None:
            params["depth"] = str(depth)
        return await self._make_request("nodes", f"files/{file_key}/nodes", params=params)

    async def get_image_fill_urls(self, file_key: str) -> Dict[str, str]:
        """Ссылки на все image fills файла: imageRef -> URL."""
        data = await self._make_request("image_fills", f"files/{file_key}/images")
        return data.get("meta", {}).get("images", {})

    async def get_node_render_urls(
        self,
        file_key: str,
        node_ids: Sequence[str],
        img_format: str,
        options: Optional[Dict[str, Any]] = None
    ) -> Dict[str, str]:
        """Рендерит узлы в PNG/SVG и возвращает ссылки nodeId -> URL."""
        if not node_ids:
            return {}

        options = options or {}
        params = {"ids": ",".join(node_ids), "format": img_format}
        if img_format == "png":
            params["scale"] = str(options.get("pngScale") or config.download.default_png_scale)
        else:
            svg_options = {**DEFAULT_SVG_OPTIONS, **(options.get("svgOptions") or {})}
            params["svg_outline_text"] = str(svg_options["outlineText"]).lower()
            params["svg_include_id"] = str(svg_options["includeId"]).lower()
            params["svg_simplify_stroke"] = str(svg_options["simplifyStroke"]).lower()

        data = await self._make_request("render", f"images/{file_key}", params=params)
        images = data.get("images") or {}
        return {node_id: url for node_id, url in images.items() if url}

    async def _download_one(self, url: str, local_path: str, operation: DownloadOperation) -> DownloadResult:
        data = await self._fetch_bytes(url)
        file_path = await asyncio.to_thread(write_image, local_path, operation.file_name, data)
        width, height = await asyncio.to_thread(read_dimensions, data, operation.file_name)

        if operation.needs_cropping:
            logger.debug(f"Cropping is not applied, {operation.file_name} saved as rendered")

        return DownloadResult(
            file_path=file_path,
            width=width,
            height=height,
            was_cropped=False,
            css_variables=css_variables(width, height) if operation.requires_image_dimensions else None,
        )

    async def _render_urls(
        self,
        file_key: str,
        batch: List[Tuple[int, DownloadOperation]],
        img_format: str,
        options: Dict[str, Any]
    ) -> Dict[int, str]:
        if not batch:
            return {}
        node_ids = list(dict.fromkeys(op.node_id for _, op in batch))
        rendered = await self.get_node_render_urls(file_key, node_ids, img_format, options)
        return {index: rendered[op.node_id] for index, op in batch if op.node_id in rendered}

    async def download_images(
        self,
        file_key: str,
        local_path: str,
        operations: Sequence[DownloadOperation],
        png_scale: float = 2,
        svg_options: Optional[Dict[str, Any]] = None
    ) -> List[Optional[DownloadResult]]:
        """
        Скачивает изображения для операций плана.

        Args:
            file_key (str): Ключ Figma-файла.
            local_path (str): Директория для сохранения.
            operations: Операции из DownloadPlan.
            png_scale (float): Масштаб PNG-рендера.
            svg_options (dict, optional): Опции SVG-рендера.

        Returns:
            List[Optional[DownloadResult]]: Результаты в порядке операций;
            None, если Figma не вернула ссылку для операции.
        """
        results: List[Optional[DownloadResult]] = [None] * len(operations)
        if not operations:
            return results

        fills = [(i, op) for i, op in enumerate(operations) if op.is_image_fill]
        nodes = [(i, op) for i, op in enumerate(operations) if not op.is_image_fill]
        svg_nodes = [(i, op) for i, op in nodes if op.file_name.lower().endswith(".svg")]
        png_nodes = [(i, op) for i, op in nodes if not op.file_name.lower().endswith(".svg")]

        urls: Dict[int, str] = {}
        if fills:
            fill_urls = await self.get_image_fill_urls(file_key)
            urls.update({i: fill_urls[op.image_ref] for i, op in fills if fill_urls.get(op.image_ref)})
        urls.update(await self._render_urls(file_key, png_nodes, "png", {"pngScale": png_scale}))
        urls.update(await self._render_urls(file_key, svg_nodes, "svg", {"svgOptions": svg_options}))

        for i, op in enumerate(operations):
            if i not in urls:
                logger.warning(f"No image URL returned for {op.image_ref or op.node_id}, skipping {op.file_name}")

        indexes = sorted(urls)
        tasks = [
            asyncio.ensure_future(self._download_one(urls[i], local_path, operations[i]))
            for i in indexes
        ]
        try:
            downloaded = await asyncio.gather(*tasks)
        except Exception:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        for i, result in zip(indexes, downloaded):
            results[i] = result
        return results


def get_figma_service(
    figma_api_key: Optional[str] = None,
    figma_oauth_token: Optional[str] = None,
    use_oauth: Optional[bool] = None
) -> FigmaService:
    """Создает клиент под учетные данные вызова; OAuth только при наличии токена."""
    return FigmaService(
        api_key=figma_api_key or "",
        oauth_token=figma_oauth_token or "",
        use_oauth=bool(use_oauth) and bool(figma_oauth_token),
    )
