"""
Планировщик выгрузки изображений.

Превращает список запрошенных экспортов в минимальный набор операций
скачивания и карту алиасов: индекс операции -> имена файлов, которые
должны быть получены из ее результата.

Правило слияния: два запроса попадают в одну операцию только если оба
ссылаются на один и тот же ``imageRef`` и ни у одного нет
``filenameSuffix``. Запросы по ``nodeId`` никогда не объединяются.
"""
import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

logger = logging.getLogger(__name__)

CropTransform = List[List[float]]
MergeKey = Tuple[str, str]


@dataclass(frozen=True)
class NodeExport:
    """Экспорт рендера узла Figma."""
    node_id: str
    file_name: str
    filename_suffix: Optional[str] = None
    needs_cropping: bool = False
    crop_transform: Optional[CropTransform] = None
    requires_image_dimensions: bool = False


@dataclass(frozen=True)
class ImageFillExport:
    """Экспорт уже загруженной в Figma картинки (image fill)."""
    image_ref: str
    file_name: str
    filename_suffix: Optional[str] = None
    needs_cropping: bool = False
    crop_transform: Optional[CropTransform] = None
    requires_image_dimensions: bool = False


ExportRequest = Union[NodeExport, ImageFillExport]


@dataclass(frozen=True)
class DownloadOperation:
    """Одна операция скачивания. Задан ровно один из node_id / image_ref."""
    file_name: str
    node_id: Optional[str] = None
    image_ref: Optional[str] = None
    needs_cropping: bool = False
    crop_transform: Optional[CropTransform] = None
    requires_image_dimensions: bool = False

    @property
    def is_image_fill(self) -> bool:
        return self.image_ref is not None


@dataclass(frozen=True)
class DownloadPlan:
    operations: Tuple[DownloadOperation, ...] = ()
    aliases: Mapping[int, Tuple[str, ...]] = field(default_factory=dict)

    def aliases_for(self, index: int) -> Tuple[str, ...]:
        return self.aliases.get(index, ())

    def total_aliases(self) -> int:
        return sum(len(names) for names in self.aliases.values())


def effective_file_name(file_name: str, suffix: Optional[str]) -> str:
    """
    Вставляет суффикс перед расширением: icon.png + dark -> icon-dark.png.

    Если суффикс уже входит в имя, имя не меняется. Если у имени нет
    расширения, суффикс дописывается в конец.
    """
    if not suffix or suffix in file_name:
        return file_name

    name, dot, ext = file_name.rpartition(".")
    if not dot:
        return f"{file_name}-{suffix}"
    return f"{name}-{suffix}.{ext}"


def merge_key(request: ExportRequest) -> Optional[MergeKey]:
    """Ключ слияния; None означает, что запрос всегда получает свою операцию."""
    if isinstance(request, ImageFillExport):
        return (request.image_ref, request.filename_suffix or "none")
    return None


def _new_operation(request: ExportRequest, file_name: str) -> DownloadOperation:
    common = dict(
        file_name=file_name,
        needs_cropping=request.needs_cropping,
        crop_transform=request.crop_transform,
        requires_image_dimensions=request.requires_image_dimensions,
    )
    if isinstance(request, ImageFillExport):
        return DownloadOperation(image_ref=request.image_ref, **common)
    return DownloadOperation(node_id=request.node_id, **common)


def plan_downloads(requests: Sequence[ExportRequest]) -> DownloadPlan:
    """
    Строит план скачивания за один проход в порядке входа.

    Args:
        requests: Запросы на экспорт.

    Returns:
        DownloadPlan: Операции и карта алиасов (индекс операции -> имена файлов).
    """
    operations: List[DownloadOperation] = []
    aliases: Dict[int, List[str]] = {}
    seen: Dict[MergeKey, int] = {}

    for request in requests:
        file_name = effective_file_name(request.file_name, request.filename_suffix)
        key = merge_key(request)

        index = seen.get(key) if key is not None and not request.filename_suffix else None
        if index is not None:
            names = aliases[index]
            if file_name not in names:
                names.append(file_name)
            if request.requires_image_dimensions and not operations[index].requires_image_dimensions:
                operations[index] = replace(operations[index], requires_image_dimensions=True)
            continue

        index = len(operations)
        operations.append(_new_operation(request, file_name))
        aliases[index] = [file_name]
        if key is not None and not request.filename_suffix:
            seen[key] = index

    logger.debug(f"Planned {len(operations)} downloads for {len(requests)} requests")
    return DownloadPlan(
        operations=tuple(operations),
        aliases={index: tuple(names) for index, names in aliases.items()},
    )
