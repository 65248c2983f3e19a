"""Figma Toolbox: MCP сервер с арифметикой и выгрузкой данных и изображений Figma."""

__version__ = "1.0.0"
