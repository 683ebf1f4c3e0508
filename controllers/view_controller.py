from typing import Callable, Iterator, Tuple, Union

import pandas as pd

from models.csv_model import CSVData, EMPTY_SPAN
from models.field_model import Field
from services.csv_service import CSVService, CSVIndexError

Row = Tuple[Field, ...]


class CSVView:
    """
    Vista inmutable sobre un CSV ya parseado.
    La fila 0 es la fila de encabezados (nombres de columna).
    Las búsquedas sin resultado devuelven un campo / fila vacía (centinela),
    que no se distingue de datos realmente vacíos.
    """

    def __init__(self, text: str = ""):
        self._data = CSVService.parse(text)
        self._rows = self._build_rows(self._data)

    @classmethod
    def from_data(cls, data: CSVData) -> "CSVView":
        view = cls.__new__(cls)
        view._data = data
        view._rows = cls._build_rows(data)
        return view

    @staticmethod
    def _build_rows(data: CSVData) -> Tuple[Row, ...]:
        return tuple(
            tuple(Field(data.buffer, span) for span in row)
            for row in data.rows
        )

    @property
    def data(self) -> CSVData:
        return self._data

    # --- DIMENSIONES ---
    def columns(self) -> int:
        return self._data.width

    def rows(self) -> int:
        return self._data.height

    def __len__(self) -> int:
        return self.rows()

    def __iter__(self) -> Iterator[Row]:
        return iter(self._rows)

    # --- ACCESO ---
    def get_row(self, row_index: int) -> Row:
        if not 0 <= row_index < self.rows():
            raise CSVIndexError(f"Fila {row_index} fuera de rango (filas: {self.rows()}).")
        return self._rows[row_index]

    def column_index(self, column_name: str) -> int:
        # Primera coincidencia exacta en la fila de encabezados
        if self._rows:
            for index, field in enumerate(self._rows[0]):
                if field.text == column_name:
                    return index
        raise CSVIndexError(f"Columna '{column_name}' no encontrada.")

    def get_field(self, row: Union[int, Row], column: Union[int, str]) -> Field:
        """
        row: índice de fila o una fila ya obtenida (get_row / find_row).
        column: índice de columna o nombre de columna.
        """
        fields = self.get_row(row) if isinstance(row, int) else row
        if isinstance(column, str):
            index = self.column_index(column)
        elif isinstance(column, int):
            index = column
        else:
            raise TypeError(f"Columna debe ser int o str, no {type(column).__name__}")
        if not 0 <= index < len(fields):
            raise CSVIndexError(f"Columna {index} fuera de rango (columnas: {len(fields)}).")
        return fields[index]

    # --- RECORRIDO ---
    def for_each_field(self, visitor: Callable[[Field], None]) -> None:
        for row in self._rows:
            for field in row:
                visitor(field)

    def for_each_row(self, visitor: Callable[[Row], None]) -> None:
        for row in self._rows:
            visitor(row)

    # --- BÚSQUEDA ---
    def find_field(self, predicate: Callable[[Field], bool]) -> Field:
        for row in self._rows:
            for field in row:
                if predicate(field):
                    return field
        return Field(self._data.buffer, EMPTY_SPAN)

    def find_row(self, predicate: Callable[[Row], bool]) -> Row:
        for row in self._rows:
            if predicate(row):
                return row
        return tuple(Field(self._data.buffer, EMPTY_SPAN) for _ in range(self.columns()))

    # --- EXPORTACIÓN ---
    def to_dataframe(self) -> pd.DataFrame:
        if not self._rows:
            return pd.DataFrame()
        header = [field.text for field in self._rows[0]]
        body = [[field.text for field in row] for row in self._rows[1:]]
        return pd.DataFrame(body, columns=header)
