"""
Единый экземпляр FastMCP: на нем регистрируются все инструменты и ресурсы,
его же обслуживают оба транспорта.
"""
from fastmcp import FastMCP

mcp = FastMCP("Figma Toolbox Server")
