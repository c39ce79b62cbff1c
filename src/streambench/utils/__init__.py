from .console import (
    Colors,
    Console,
    ConsoleUpdateStep,
    StatusIcons,
    StatusLevel,
    StatusStyles,
)
from .functions import safe_divide, safe_format_number, safe_rate
from .registry import RegistryMixin, RegistryObjT
from .typing import get_literal_vals

__all__ = [
    "Colors",
    "Console",
    "ConsoleUpdateStep",
    "RegistryMixin",
    "RegistryObjT",
    "StatusIcons",
    "StatusLevel",
    "StatusStyles",
    "get_literal_vals",
    "safe_divide",
    "safe_format_number",
    "safe_rate",
]
