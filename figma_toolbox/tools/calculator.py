"""
Арифметические инструменты.
"""
import logging
import math
import time
from decimal import Decimal
from typing import Literal
from ..mcp_instance import mcp
from ..metrics import TOOL_CALLS_TOTAL, TOOL_CALL_DURATION

logger = logging.getLogger(__name__)

DIVIDE_BY_ZERO_MESSAGE = "Error: Cannot divide by zero"


def format_number(value: float) -> str:
    """
    Печатает число так же, как String(n) в JavaScript.

    Целые значения без дробной части (3.0 -> "3"), обычная запись в
    диапазоне [1e-6, 1e21), иначе экспонента вида 1e+21 / 1e-7;
    бесконечности печатаются как Infinity.
    """
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    text = repr(value)
    if 1e-6 <= abs(value) < 1e21:
        text = format(Decimal(text), "f")
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return text

    mantissa, _, exponent = text.partition("e")
    power = int(exponent)
    return f"{mantissa}e{'+' if power > 0 else '-'}{abs(power)}"


@mcp.tool
async def add(a: float, b: float) -> str:
    """Складывает два числа."""
    start_time = time.time()
    result = format_number(a + b)

    TOOL_CALL_DURATION.labels(tool_name="add").observe(time.time() - start_time)
    TOOL_CALLS_TOTAL.labels(tool_name="add", status="success").inc()
    return result


@mcp.tool
async def calculate(
    operation: Literal["add", "subtract", "multiply", "divide"],
    a: float,
    b: float
) -> str:
    """
    Выполняет арифметическую операцию над двумя числами.

    Args:
        operation: add, subtract, multiply или divide.
        a (float): Первый операнд.
        b (float): Второй операнд.

    Returns:
        str: Результат; при делении на ноль текст ошибки.
    """
    start_time = time.time()
    if operation == "add":
        result = a + b
    elif operation == "subtract":
        result = a - b
    elif operation == "multiply":
        result = a * b
    else:
        if b == 0:
            logger.info("calculate: division by zero requested")
            TOOL_CALL_DURATION.labels(tool_name="calculate").observe(time.time() - start_time)
            TOOL_CALLS_TOTAL.labels(tool_name="calculate", status="domain_error").inc()
            return DIVIDE_BY_ZERO_MESSAGE
        result = a / b

    text = format_number(result)
    TOOL_CALL_DURATION.labels(tool_name="calculate").observe(time.time() - start_time)
    TOOL_CALLS_TOTAL.labels(tool_name="calculate", status="success").inc()
    return text
