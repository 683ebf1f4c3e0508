import logging
from importlib import resources
from typing import List, Optional, Sequence, Tuple

from models.csv_model import CSVData, Span, EMPTY_SPAN

logger = logging.getLogger(__name__)


class CSVServiceError(Exception):
    pass


class CSVIndexError(CSVServiceError, IndexError):
    pass


class CSVService:
    """
    Servicio para leer CSVs con encabezado mágico '"cppsv"\\n'.
    - Valida el encabezado antes de parsear (si falta, la grilla queda vacía).
    - Calcula ancho (fila 0) y alto con dos pasadas que respetan comillas.
    - Corta el buffer en Spans sin copiar texto, en una sola pasada.
    """

    HEADER = '"cppsv"\n'
    ENCODINGS = ('utf-8-sig', 'utf-8', 'latin-1', 'cp1252')

    @staticmethod
    def has_header(text: str) -> bool:
        header = CSVService.HEADER
        return len(text) >= len(header) and text[:len(header)] == header

    @staticmethod
    def count_columns(body: str) -> int:
        # Al menos 1 columna
        columns = 1
        in_quotes = False
        for chr_ in body:
            if chr_ == '"':
                in_quotes = not in_quotes
            if in_quotes:
                continue
            if chr_ == ',':
                columns += 1
            elif chr_ == '\n':
                break
        return columns

    @staticmethod
    def count_rows(body: str, columns: int) -> int:
        """
        Cuenta separadores válidos y divide por el ancho.
        Las filas con comas de más o de menos se absorben en la división entera
        (recorte silencioso), no se reportan como error.
        """
        count = 1
        index = 0
        in_quotes = False
        for chr_ in body:
            if chr_ == '"':
                in_quotes = not in_quotes
            if in_quotes:
                continue
            if chr_ == ',' and index < columns:
                count += 1
                index += 1
            elif chr_ == '\n':
                count += 1
                index = 0
        return count // columns

    @staticmethod
    def strip_field(text: str, start: int, end: int) -> Span:
        # Coma sobrante al inicio (no ocurre en entradas bien formadas)
        if start < end and text[start] == ',':
            start += 1
        if end - start > 1 and text[start] == '"' and text[end - 1] == '"':
            start += 1
            end -= 1
        return Span(start, end)

    @staticmethod
    def split_fields(text: str, offset: int, columns: int, rows: int) -> Tuple[Tuple[Span, ...], ...]:
        """
        Llena una grilla de rows x columns con Spans sobre `text`, empezando en `offset`.
        Los campos más allá del ancho (o de la última fila) se descartan.
        El último campo sin salto de línea final no se emite y queda vacío.
        """
        grid: List[List[Span]] = [[EMPTY_SPAN] * columns for _ in range(rows)]
        field_start = offset
        index_x = 0
        index_y = 0
        dropped = 0
        in_quotes = False
        for pos in range(offset, len(text)):
            chr_ = text[pos]
            if chr_ == '"':
                in_quotes = not in_quotes
            if in_quotes:
                continue
            if chr_ in ',\n':
                if index_x < columns:
                    if index_y < rows:
                        grid[index_y][index_x] = CSVService.strip_field(text, field_start, pos)
                    else:
                        dropped += 1
                    field_start = pos + 1
                    index_x += 1
                else:
                    dropped += 1
            if chr_ == '\n':
                index_x = 0
                index_y += 1
        if dropped:
            logger.warning("Se descartaron %d campos fuera de la grilla %dx%d", dropped, rows, columns)
        return tuple(tuple(row) for row in grid)

    @staticmethod
    def parse(text: str) -> CSVData:
        if not CSVService.has_header(text):
            logger.warning("Falta el encabezado %r: se devuelve una grilla vacía", CSVService.HEADER)
            return CSVData(text)
        offset = len(CSVService.HEADER)
        body = text[offset:]
        columns = CSVService.count_columns(body)
        rows = CSVService.count_rows(body, columns)
        logger.debug("Dimensiones calculadas: %d filas x %d columnas", rows, columns)
        return CSVData(text, CSVService.split_fields(text, offset, columns, rows))

    @staticmethod
    def read_csv(path: str, encodings: Optional[Sequence[str]] = None) -> CSVData:
        # 1. Intentar leer con diferentes codificaciones
        text = None
        for enc in encodings or CSVService.ENCODINGS:
            try:
                with open(path, "r", encoding=enc) as f:
                    text = f.read()
                logger.debug("Leído %s con codificación %s", path, enc)
                break  # Si lee bien, salimos del bucle
            except UnicodeDecodeError:
                continue
            except OSError as e:
                raise CSVServiceError(f"Error de lectura: {e}") from e

        if text is None:
            raise CSVServiceError("No se pudo decodificar el archivo (revise codificación).")

        # 2. Parsear el texto completo
        return CSVService.parse(text)

    @staticmethod
    def read_resource(package: str, resource: str, encoding: str = 'utf-8') -> CSVData:
        """Carga un CSV incluido como dato de un paquete (se lee una sola vez al arrancar)."""
        try:
            text = resources.files(package).joinpath(resource).read_text(encoding=encoding)
        except (OSError, ModuleNotFoundError, UnicodeDecodeError) as e:
            raise CSVServiceError(f"No se pudo cargar el recurso {package}/{resource}: {e}") from e
        return CSVService.parse(text)
