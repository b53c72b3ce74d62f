from typing import Any, List, Optional, Sequence


class TableData:
    """
    Representa la primera hoja de una planilla en memoria:
      - rows: lista de filas; la fila 0 es el encabezado
      - row_numbers: número de fila en la hoja (1-based) de cada elemento de rows;
        por defecto 1..N
      - source: nombre del archivo de origen
      - sheet_name: hoja leída (None para CSV)
    """
    def __init__(self, rows: Optional[List[Sequence[Any]]] = None, source: str = "",
                 sheet_name: Optional[str] = None, row_numbers: Optional[List[int]] = None):
        self.rows = rows or []
        self.row_numbers = list(row_numbers) if row_numbers is not None else list(range(1, len(self.rows) + 1))
        if len(self.row_numbers) != len(self.rows):
            raise ValueError("row_numbers debe tener un número por fila.")
        self.source = source
        self.sheet_name = sheet_name

    @property
    def header(self) -> List[Any]:
        return list(self.rows[0]) if self.rows else []

    @property
    def data_rows(self) -> List[Sequence[Any]]:
        return self.rows[1:]

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self):
        return iter(self.rows)

    def __getitem__(self, index):
        return self.rows[index]

    def __repr__(self) -> str:
        return f"TableData(source={self.source!r}, sheet_name={self.sheet_name!r}, rows={len(self.rows)})"
