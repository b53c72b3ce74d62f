from typing import List, Mapping, Optional, Union

import pandas as pd

from config.logging_config import clear_current_source, get_logger, set_current_source
from config.settings import settings
from models.column_spec import ColumnSpec, Record
from services.extractor_service import (
    EmptyTableError,
    ExtractionError,
    HeaderMappedRowExtractor,
)
from services.spreadsheet_service import SpreadsheetService, SpreadsheetServiceError

logger = get_logger(__name__)

MSG_EMPTY = "El archivo parece estar vacío o no tiene datos."
MSG_INVALID = "Formato de datos inválido. Verifique las columnas del archivo."
MSG_READ = "Ocurrió un error al leer el archivo."


class ImportContext:
    def __init__(self):
        self.records: List[Record] = []
        self.source: str | None = None
        self.sheet_name: str | None = None
        self.last_error: str | None = None


class ImportController:
    """
    Archivo -> tabla -> registros. Conserva la última importación correcta;
    si una importación falla, los registros previos no se tocan y el mensaje
    para el usuario queda en `last_error`.
    """

    def __init__(self, columns: Union[ColumnSpec, Mapping[str, str], None] = None, sheet_name: Optional[str] = None):
        self.columns = columns if isinstance(columns, ColumnSpec) else ColumnSpec(settings.IMPORT_COLUMNS if columns is None else columns)
        self.sheet_name = sheet_name if sheet_name is not None else settings.IMPORT_SHEET
        self.extractor = HeaderMappedRowExtractor(self.columns)
        self.context = ImportContext()

    @property
    def last_error(self) -> str | None:
        return self.context.last_error

    def load_file(self, path: str, sheet_name: Optional[str] = None) -> List[Record]:
        sheet = sheet_name if sheet_name is not None else self.sheet_name
        set_current_source(path)
        try:
            try:
                table = SpreadsheetService.read_file(path, sheet)
                records = self.extractor.extract(table)
            except EmptyTableError:
                self._fail(MSG_EMPTY)
                raise
            except ExtractionError as e:
                self._fail(f"{MSG_INVALID} {e}")
                raise
            except SpreadsheetServiceError as e:
                self._fail(f"{MSG_READ} {e}")
                raise
            except Exception as e:
                self._fail(MSG_READ)
                raise SpreadsheetServiceError(f"Error inesperado al leer el archivo: {e}") from e

            self.context.records = records
            self.context.source = table.source
            self.context.sheet_name = table.sheet_name
            self.context.last_error = None
            logger.info(f"Importación correcta: {len(records)} registros")
            return list(records)
        finally:
            clear_current_source()

    def _fail(self, message: str):
        self.context.last_error = message
        logger.warning(message)

    def get_records(self) -> List[Record]:
        return [dict(r) for r in self.context.records]

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(self.context.records, columns=self.columns.fields)

    def clear(self):
        self.context = ImportContext()
