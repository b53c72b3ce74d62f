"""
Configuración del importador.

Todas las opciones pueden sobreescribirse por variables de entorno
(sensibles a mayúsculas), p. ej.:

    IMPORT_COLUMNS='{"name": "Nombre", "email": "Correo"}'
    IMPORT_SHEET=Hoja2
    LOG_LEVEL=DEBUG
"""

import json
from typing import Dict, List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode
from typing_extensions import Annotated

from models.column_spec import DEFAULT_COLUMNS, ColumnSpec


class Settings(BaseSettings):

    # === COLUMNAS ===
    IMPORT_COLUMNS: Annotated[Dict[str, str], NoDecode] = dict(DEFAULT_COLUMNS)
    IMPORT_SHEET: Optional[str] = None

    # === CSV ===
    CSV_ENCODINGS: Annotated[List[str], NoDecode] = ['utf-8-sig', 'utf-8', 'latin-1', 'cp1252']

    # === LOGGING ===
    LOG_LEVEL: str = "ERROR"

    @field_validator('IMPORT_COLUMNS', mode='before')
    @classmethod
    def parse_columns(cls, v):
        """Acepta JSON o pares 'campo=Etiqueta' separados por coma."""
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                pairs = [p.split('=', 1) for p in v.split(',') if '=' in p]
                return {k.strip(): label.strip() for k, label in pairs}
        return v

    @field_validator('CSV_ENCODINGS', mode='before')
    @classmethod
    def parse_json_list(cls, v):
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [x.strip() for x in v.split(',') if x.strip()]
        return v

    @field_validator('IMPORT_SHEET', mode='before')
    @classmethod
    def empty_sheet_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def column_spec(self) -> ColumnSpec:
        return ColumnSpec(self.IMPORT_COLUMNS)

    class Config:
        case_sensitive = True


settings = Settings()
