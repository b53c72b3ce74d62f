import argparse
import json
import sys

from config.logging_config import setup_logging
from config.settings import settings
from controllers.import_controller import ImportController
from models.column_spec import ColumnSpecError
from services.extractor_service import ExtractionError
from services.spreadsheet_service import SpreadsheetServiceError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Importa registros desde una planilla (.xlsx, .xls, .csv).")
    parser.add_argument("file", help="Ruta de la planilla")
    parser.add_argument("--sheet", default=None, help="Hoja a leer (por defecto la primera)")
    parser.add_argument("--columns", default=None,
                        help='Columnas requeridas en JSON, p. ej. \'{"name": "Name", "email": "Email"}\'')
    parser.add_argument("--log-level", default=None, help="Nivel de log en stderr (por defecto LOG_LEVEL)")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    # stdout queda solo para la tabla de registros
    setup_logging(args.log_level or settings.LOG_LEVEL, stream=sys.stderr)

    try:
        columns = json.loads(args.columns) if args.columns is not None else None
        controller = ImportController(columns=columns, sheet_name=args.sheet)
    except (json.JSONDecodeError, ColumnSpecError) as e:
        print(f"Columnas inválidas: {e}", file=sys.stderr)
        return 2

    try:
        controller.load_file(args.file)
    except (ExtractionError, SpreadsheetServiceError):
        print(controller.last_error, file=sys.stderr)
        return 1

    print(controller.to_dataframe().to_string(index=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
