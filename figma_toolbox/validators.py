"""
Валидаторы входных данных.
"""
import re

NODE_ID_PATTERN = r'^\d+:\d+$'
FILE_NAME_PATTERN = r'^[a-zA-Z0-9_.-]+$'

NODE_ID_ERROR = "Node ID must be in the format of 'number:number'"
FILE_NAME_ERROR = (
    "File name can only contain alphanumeric characters, underscores, dots, and hyphens"
)

def is_valid_node_id(node_id: str) -> bool:
    """Проверяет ID узла Figma вида 123:456."""
    if not node_id or not isinstance(node_id, str):
        return False
    return re.fullmatch(NODE_ID_PATTERN, node_id) is not None

def is_valid_file_name(file_name: str) -> bool:
    """Проверяет имя выходного файла."""
    if not file_name or not isinstance(file_name, str):
        return False
    return re.fullmatch(FILE_NAME_PATTERN, file_name) is not None

def validate_node_id(node_id: str) -> str:
    if not is_valid_node_id(node_id):
        raise ValueError(NODE_ID_ERROR)
    return node_id

def validate_file_name(file_name: str) -> str:
    if not is_valid_file_name(file_name):
        raise ValueError(FILE_NAME_ERROR)
    return file_name

def validate_filename_suffix(suffix: str) -> str:
    """Суффикс попадает в имя файла, поэтому допускает тот же набор символов."""
    if not is_valid_file_name(suffix):
        raise ValueError("Filename suffix " + FILE_NAME_ERROR[len("File name "):])
    return suffix
