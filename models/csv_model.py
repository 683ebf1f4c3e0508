from typing import NamedTuple, Tuple


class Span(NamedTuple):
    """Rango semiabierto [start, end) sobre el buffer del CSV. No guarda texto."""
    start: int = 0
    end: int = 0

    @property
    def length(self) -> int:
        return self.end - self.start


# Span por defecto: las filas se crean con este valor antes de llenarse
EMPTY_SPAN = Span(0, 0)


class CSVData:
    """
    Representa el CSV en memoria:
      - buffer: el texto completo (encabezado mágico incluido), nunca se modifica
      - rows: tupla de filas; cada fila es una tupla de Span del mismo largo
    """
    __slots__ = ("buffer", "rows")

    def __init__(self, buffer: str = "", rows: Tuple[Tuple[Span, ...], ...] = ()):
        self.buffer = buffer
        self.rows = tuple(tuple(row) for row in rows)

    @property
    def width(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    @property
    def height(self) -> int:
        return len(self.rows)

    def text(self, span: Span) -> str:
        return self.buffer[span.start:span.end]
