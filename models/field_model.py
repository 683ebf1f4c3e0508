from typing import Optional

from models.csv_model import Span, EMPTY_SPAN
from services import convert_service


class Field:
    """
    Un campo del CSV: referencia al buffer + Span.
    El valor tipado no se guarda; as_integer / as_float se calculan en cada llamada.
    """
    __slots__ = ("_buffer", "_span")

    def __init__(self, buffer: str = "", span: Span = EMPTY_SPAN):
        self._buffer = buffer
        self._span = span

    @property
    def span(self) -> Span:
        return self._span

    @property
    def text(self) -> str:
        return self._buffer[self._span.start:self._span.end]

    def as_integer(self, radix: int = 10, bits: Optional[int] = None) -> Optional[int]:
        return convert_service.parse_integer(self.text, radix, bits)

    def as_float(self) -> Optional[float]:
        return convert_service.parse_float(self.text)

    def convert(self, kind, radix: int = 10):
        # Equivalente a as<T>(): int, float o str
        if kind is int:
            return self.as_integer(radix)
        if kind is float:
            return self.as_float()
        if kind is str:
            return self.text
        raise TypeError(f"Tipo de conversión no soportado: {kind!r}")

    def __len__(self) -> int:
        return self._span.length

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"Field({self.text!r})"

    def __eq__(self, other) -> bool:
        if isinstance(other, Field):
            return self.text == other.text
        if isinstance(other, str):
            return self.text == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.text)
