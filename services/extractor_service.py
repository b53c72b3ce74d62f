from datetime import date, datetime, time
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from config.logging_config import get_logger
from models.column_spec import ColumnSpec, Record
from models.table_model import TableData

logger = get_logger(__name__)


class ExtractionError(Exception):
    pass


class EmptyTableError(ExtractionError):
    def __init__(self, row_count: int):
        self.row_count = row_count
        super().__init__("El archivo parece estar vacío o no tiene filas de datos.")


class MissingHeaderError(ExtractionError):
    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        labels = ", ".join(f"'{m}'" for m in self.missing)
        super().__init__(f"Faltan columnas requeridas en el encabezado: {labels}.")


class DuplicateHeaderError(ExtractionError):
    def __init__(self, duplicated: List[str]):
        self.duplicated = list(duplicated)
        labels = ", ".join(f"'{d}'" for d in self.duplicated)
        super().__init__(f"Columnas repetidas en el encabezado: {labels}.")


class InvalidRowError(ExtractionError):
    def __init__(self, row_number: int, missing: List[str]):
        self.row_number = row_number
        self.missing = list(missing)
        labels = ", ".join(f"'{m}'" for m in self.missing)
        super().__init__(f"Fila {row_number}: falta valor en {labels}.")


def cell_to_text(value: Any) -> str:
    """Convierte una celda a texto; None -> ''."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    # bool antes que int: True es instancia de int
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value != value:  # NaN
            return ""
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value).strip()


class HeaderMappedRowExtractor:
    """
    Proyecta las filas de una tabla a registros de forma fija.

    La fila 0 es el encabezado. Cada campo de `columns` se resuelve una sola
    vez a un índice buscando su etiqueta exacta (sensible a mayúsculas).
    Cualquier error aborta la extracción completa: no hay resultados parciales.
    """

    def __init__(self, columns: Union[ColumnSpec, Mapping[str, str], None] = None):
        self.columns = columns if isinstance(columns, ColumnSpec) else ColumnSpec(columns)

    def extract(self, table: Union[TableData, Sequence[Sequence[Any]]]) -> List[Record]:
        if not isinstance(table, TableData):
            table = TableData(rows=list(table))
        rows = table.rows
        if len(rows) < 2:
            raise EmptyTableError(len(rows))

        index_by_field = self._resolve_indexes(rows[0])

        records: List[Record] = []
        for row_number, row in zip(table.row_numbers[1:], rows[1:]):
            records.append(self._project_row(row, row_number, index_by_field))

        logger.debug(f"{len(records)} registros extraídos ({len(self.columns)} columnas)")
        return records

    def _resolve_indexes(self, header: Sequence[Any]) -> Dict[str, int]:
        positions: Dict[str, List[int]] = {}
        for idx, cell in enumerate(header):
            label = cell if isinstance(cell, str) else cell_to_text(cell)
            positions.setdefault(label, []).append(idx)

        missing = [label for label in self.columns.labels if label not in positions]
        if missing:
            raise MissingHeaderError(missing)

        duplicated = [label for label in self.columns.labels if len(positions[label]) > 1]
        if duplicated:
            raise DuplicateHeaderError(duplicated)

        return {field: positions[label][0] for field, label in self.columns.items()}

    def _project_row(self, row: Sequence[Any], row_number: int, index_by_field: Dict[str, int]) -> Record:
        record: Record = {}
        missing = []
        for field, idx in index_by_field.items():
            value = cell_to_text(row[idx]) if idx < len(row) else ""
            if not value:
                missing.append(self.columns[field])
            record[field] = value

        if missing:
            raise InvalidRowError(row_number, missing)
        return record


def extract_records(table: Union[TableData, Sequence[Sequence[Any]]], columns: Optional[Mapping[str, str]] = None) -> List[Record]:
    return HeaderMappedRowExtractor(columns).extract(table)
