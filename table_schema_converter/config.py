from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from dotenv import load_dotenv

load_dotenv()

DEFAULT_COLUMNS: Tuple[str, ...] = ('Required', 'Field', 'Type', 'Description', 'Example', 'Default')

# Column widths in pixels, keyed by header text
DEFAULT_COLUMN_WIDTHS: Dict[str, int] = {
    'Required': 80,
    'Mandatory': 80,
    'Field': 140,
    'Type': 100,
    'Description': 260,
    'Example': 260,
    'Default': 260,
}
FALLBACK_COLUMN_WIDTH = 120

DEFAULT_SCHEMA_VERSION = os.getenv('SCHEMA_VERSION_DEFAULT', 'http://json-schema.org/draft-07/schema#')

APP_SERVER_NAME = os.getenv('APP_SERVER_NAME', '127.0.0.1')
APP_SERVER_PORT = int(os.getenv('APP_SERVER_PORT', '7860'))


def column_width(name: str) -> int:
    return DEFAULT_COLUMN_WIDTHS.get(name, FALLBACK_COLUMN_WIDTH)


@dataclass(frozen=True)
class TableConfig:
    columns: List[str] = field(default_factory=lambda: list(DEFAULT_COLUMNS))
    table_width: int = 1100  # 80+140+100+260+260+260
    row_height: int = 36
    horizontal_gap: int = 100
    vertical_gap: int = 50

    @property
    def header_height(self) -> int:
        # title row + column header row
        return self.row_height * 2


DEFAULT_TABLE_CONFIG = TableConfig()
