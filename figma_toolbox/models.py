"""
Pydantic-модели параметров инструментов.
"""
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .download_planner import ExportRequest, ImageFillExport, NodeExport
from .validators import validate_file_name, validate_filename_suffix, validate_node_id


class ExportRequestParams(BaseModel):
    """Один элемент ``nodes`` инструмента download_figma_images."""

    nodeId: Optional[str] = Field(
        None, description="ID узла Figma для рендера, например 1234:5678"
    )
    imageRef: Optional[str] = Field(
        None, description="imageRef картинки (image fill); если задан, качается оригинал картинки"
    )
    fileName: str = Field(..., description="Имя локального файла с расширением (.png или .svg)")
    needsCropping: bool = Field(False, description="Нужно ли кадрирование")
    cropTransform: Optional[List[List[float]]] = Field(None, description="Матрица кадрирования Figma")
    requiresImageDimensions: bool = Field(False, description="Вернуть размеры изображения в CSS-переменных")
    filenameSuffix: Optional[str] = Field(
        None, description="Суффикс, добавляемый к имени файла перед расширением"
    )

    @field_validator("nodeId")
    @classmethod
    def _check_node_id(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return validate_node_id(v)

    @field_validator("fileName")
    @classmethod
    def _check_file_name(cls, v: str) -> str:
        return validate_file_name(v)

    @field_validator("filenameSuffix")
    @classmethod
    def _check_filename_suffix(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return v
        return validate_filename_suffix(v)


    @model_validator(mode="after")
    def _require_source(self) -> "ExportRequestParams":
        if not self.nodeId and not self.imageRef:
            raise ValueError("Either nodeId or imageRef must be provided")
        return self

    def to_export(self) -> ExportRequest:
        """Переводит параметры в запрос планировщика; imageRef выбирает image fill."""
        common = dict(
            file_name=self.fileName,
            filename_suffix=self.filenameSuffix or None,
            needs_cropping=self.needsCropping,
            crop_transform=self.cropTransform,
            requires_image_dimensions=self.requiresImageDimensions,
        )
        if self.imageRef:
            return ImageFillExport(image_ref=self.imageRef, **common)
        return NodeExport(node_id=self.nodeId, **common)


class SvgOptions(BaseModel):
    outlineText: Optional[bool] = None
    includeId: Optional[bool] = None
    simplifyStroke: Optional[bool] = None


class RenderOptions(BaseModel):
    """Опции рендера узлов."""
    pngScale: Optional[float] = Field(None, gt=0)
    svgOptions: Optional[SvgOptions] = None
