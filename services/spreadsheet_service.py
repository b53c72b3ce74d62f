import csv
import io
import os
from typing import Any, List, Optional, Sequence, Tuple

import openpyxl
import xlrd

from config.logging_config import get_logger
from config.settings import settings
from models.table_model import TableData

logger = get_logger(__name__)

SUPPORTED_EXTENSIONS = ('.xlsx', '.xls', '.csv')

# (número de fila en la hoja, 1-based; valores de la fila)
NumberedRow = Tuple[int, List[Any]]


class SpreadsheetServiceError(Exception):
    pass


class SpreadsheetService:
    """
    Decodifica la primera hoja (o la hoja indicada) de una planilla en filas.
    - CSV: prueba varias codificaciones y detecta el delimitador por el encabezado.
    - XLSX: openpyxl en modo solo lectura, valores calculados.
    - XLS: xlrd.
    Cada fila conserva su número de fila original. Solo se recortan las filas
    vacías al inicio y al final; las vacías intermedias llegan al extractor.
    """

    @staticmethod
    def read_file(path: str, sheet_name: Optional[str] = None) -> TableData:
        if not path:
            raise SpreadsheetServiceError("No se indicó ningún archivo.")
        try:
            with open(path, "rb") as f:
                content = f.read()
        except OSError as e:
            raise SpreadsheetServiceError(f"Error de lectura: {e}")
        return SpreadsheetService.read_bytes(content, os.path.basename(path), sheet_name)

    @staticmethod
    def read_bytes(content: bytes, filename: str, sheet_name: Optional[str] = None) -> TableData:
        ext = os.path.splitext(filename)[1].lower()
        if ext not in SUPPORTED_EXTENSIONS:
            raise SpreadsheetServiceError(
                f"Formato no soportado '{ext or filename}'. Use {', '.join(SUPPORTED_EXTENSIONS)}."
            )

        if ext == '.csv':
            numbered = SpreadsheetService._read_csv(content)
            sheet_used = None
        elif ext == '.xlsx':
            numbered, sheet_used = SpreadsheetService._read_xlsx(content, sheet_name)
        else:
            numbered, sheet_used = SpreadsheetService._read_xls(content, sheet_name)

        numbered = _trim_blank_edges(numbered)
        logger.info(f"{filename}: {len(numbered)} filas leídas" + (f" de la hoja '{sheet_used}'" if sheet_used else ""))
        return TableData(
            rows=[row for _, row in numbered],
            source=filename,
            sheet_name=sheet_used,
            row_numbers=[number for number, _ in numbered],
        )

    # --- CSV ---
    @staticmethod
    def _decode(content: bytes) -> str:
        for enc in settings.CSV_ENCODINGS:
            try:
                return content.decode(enc)
            except (UnicodeDecodeError, LookupError):
                continue
        raise SpreadsheetServiceError("No se pudo decodificar el archivo (revise codificación).")

    @staticmethod
    def _read_csv(content: bytes) -> List[NumberedRow]:
        text = SpreadsheetService._decode(content)
        header_line = next((line for line in text.splitlines() if line.strip()), None)
        if header_line is None:
            return []

        # Delimitador: el más frecuente en el encabezado; por defecto coma
        possible_delimiters = [',', ';', '\t', '|']
        delimiter = max(possible_delimiters, key=lambda d: header_line.count(d))
        if header_line.count(delimiter) == 0:
            delimiter = ','

        numbered: List[NumberedRow] = []
        reader = csv.reader(io.StringIO(text), delimiter=delimiter)
        start = 1
        try:
            for row in reader:
                numbered.append((start, [cell.strip() for cell in row]))
                # Un campo entre comillas puede ocupar varias líneas
                start = reader.line_num + 1
        except csv.Error as e:
            raise SpreadsheetServiceError(f"CSV mal formado (línea {reader.line_num}): {e}")
        return numbered

    # --- EXCEL ---
    @staticmethod
    def _read_xlsx(content: bytes, sheet_name: Optional[str]):
        try:
            wb = openpyxl.load_workbook(io.BytesIO(content), read_only=True, data_only=True)
        except Exception as e:
            raise SpreadsheetServiceError(f"No se pudo abrir el libro Excel: {e}")

        try:
            if sheet_name is None:
                ws = wb.worksheets[0]
            elif sheet_name in wb.sheetnames:
                ws = wb[sheet_name]
            else:
                raise SpreadsheetServiceError(
                    f"La hoja '{sheet_name}' no existe. Hojas disponibles: {', '.join(wb.sheetnames)}."
                )
            numbered = [
                (idx, [_strip(cell) for cell in row])
                for idx, row in enumerate(ws.iter_rows(min_row=1, values_only=True), start=1)
            ]
            return numbered, ws.title
        finally:
            wb.close()

    @staticmethod
    def _read_xls(content: bytes, sheet_name: Optional[str]):
        try:
            book = xlrd.open_workbook(file_contents=content, formatting_info=False)
        except Exception as e:
            raise SpreadsheetServiceError(f"No se pudo abrir el libro Excel: {e}")

        try:
            names = book.sheet_names()
            if not names:
                return [], None
            if sheet_name is None:
                sheet = book.sheet_by_index(0)
            elif sheet_name in names:
                sheet = book.sheet_by_name(sheet_name)
            else:
                raise SpreadsheetServiceError(
                    f"La hoja '{sheet_name}' no existe. Hojas disponibles: {', '.join(names)}."
                )

            numbered = []
            for row_idx in range(sheet.nrows):
                row = [
                    _xls_cell(sheet.cell_value(row_idx, col_idx), sheet.cell_type(row_idx, col_idx), book.datemode)
                    for col_idx in range(sheet.ncols)
                ]
                numbered.append((row_idx + 1, row))
            return numbered, sheet.name
        finally:
            book.release_resources()


def _xls_cell(value: Any, cell_type: int, datemode: int) -> Any:
    if cell_type in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK, xlrd.XL_CELL_ERROR):
        return None
    if cell_type == xlrd.XL_CELL_BOOLEAN:
        return bool(value)
    if cell_type == xlrd.XL_CELL_DATE:
        try:
            return xlrd.xldate.xldate_as_datetime(value, datemode)
        except (xlrd.xldate.XLDateError, ValueError):
            return value
    return _strip(value)


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def _is_blank(row: Sequence[Any]) -> bool:
    return all(cell is None or (isinstance(cell, str) and not cell.strip()) for cell in row)


def _trim_blank_edges(numbered: List[NumberedRow]) -> List[NumberedRow]:
    start, end = 0, len(numbered)
    while start < end and _is_blank(numbered[start][1]):
        start += 1
    while end > start and _is_blank(numbered[end - 1][1]):
        end -= 1
    return numbered[start:end]
