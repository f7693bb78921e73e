from typing import Optional


class RTETedError(Exception):
    """Базовое исключение пакета."""


class MalformedInputError(RTETedError):
    """Строка CoNLL-X не соответствует ожидаемому формату."""

    def __init__(self, message: str, line_no: Optional[int] = None, line: Optional[str] = None):
        self.line_no = line_no
        self.line = line
        if line_no is not None:
            message = f"line {line_no}: {message}"
        super().__init__(message)


class MalformedTreeError(RTETedError):
    """Циклы или несогласованные ссылки на родителей в дереве."""


class TreeSizeLimitError(MalformedTreeError):
    """Дерево больше допустимого размера (max_tree_size)."""


class ConfigurationError(RTETedError):
    pass
