"""
Configuración de pytest.
"""
import logging
import sys
from pathlib import Path

import pytest

# Raíz del repositorio en el path para importar models/, services/, ...
root_path = Path(__file__).parent.parent
sys.path.insert(0, str(root_path))


@pytest.fixture(autouse=True)
def restore_root_logger():
    """setup_logging() reemplaza los handlers del logger raíz; se restauran tras cada test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def valid_rows():
    return [
        ["Name", "Email", "Age"],
        ["Ann", "a@x.com", "30"],
        ["Bob", "b@x.com", 41],
        ["Cid", "c@x.com", 27.0],
    ]


@pytest.fixture
def xlsx_file(tmp_path):
    """Crea un .xlsx en disco a partir de una lista de filas."""
    import openpyxl

    def _make(rows, name="data.xlsx", sheets=None):
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = "Hoja1"
        for row in rows:
            ws.append(row)
        for title, extra_rows in (sheets or {}).items():
            extra = wb.create_sheet(title)
            for row in extra_rows:
                extra.append(row)
        path = tmp_path / name
        wb.save(path)
        return path

    return _make
