import logging
from typing import Dict, List, Optional

import pandas as pd
from openpyxl.styles import Font

from controllers.view_controller import CSVView
from models.csv_model import CSVData
from services.csv_service import CSVService, CSVServiceError

logger = logging.getLogger(__name__)


class CSVContext:
    def __init__(self, source: str = ""):
        self.source = source
        self.view: CSVView | None = None


class CSVController:
    """
    Registro de vistas CSV con nombre (contextos).
    Un encabezado inválido no es un error: la vista queda vacía y se deja
    el aviso en last_warning.
    """

    DEFAULT_CONTEXT = 'general'
    # Caracteres que Excel no admite en nombres de hoja
    SHEET_FORBIDDEN = '/\\?*[]:'
    SHEET_MAX_LEN = 31

    def __init__(self):
        self.contexts: Dict[str, CSVContext] = {}
        self.last_warning: str | None = None

    # --- LECTURA ---
    def load_csv(self, path: str, context_key: str = DEFAULT_CONTEXT, encodings=None) -> CSVView:
        try:
            data = CSVService.read_csv(path, encodings)
        except CSVServiceError: raise
        except Exception as e: raise CSVServiceError(f"Error inesperado al leer CSV: {e}") from e
        return self._store(context_key, data, source=str(path))

    def load_text(self, text: str, context_key: str = DEFAULT_CONTEXT) -> CSVView:
        return self._store(context_key, CSVService.parse(text), source="<texto>")

    def load_resource(self, package: str, resource: str, context_key: str = DEFAULT_CONTEXT) -> CSVView:
        data = CSVService.read_resource(package, resource)
        return self._store(context_key, data, source=f"{package}/{resource}")

    def _store(self, context_key: str, data: CSVData, source: str) -> CSVView:
        self.last_warning = None
        ctx = CSVContext(source)
        ctx.view = CSVView.from_data(data)
        self.contexts[context_key] = ctx

        if not ctx.view.rows():
            self.last_warning = f"'{source}' no tiene el encabezado {CSVService.HEADER!r}: vista vacía."
            logger.warning("%s", self.last_warning)
        else:
            logger.info("Contexto '%s' cargado desde %s (%d filas x %d columnas)",
                        context_key, source, ctx.view.rows(), ctx.view.columns())
        return ctx.view

    def get_view(self, context_key: str = DEFAULT_CONTEXT) -> CSVView:
        ctx = self.contexts.get(context_key)
        if ctx is None or ctx.view is None:
            raise CSVServiceError(f"No hay datos cargados en {context_key}.")
        return ctx.view

    def get_contexts(self) -> List[str]:
        return list(self.contexts.keys())

    def unload(self, context_key: str) -> None:
        if self.contexts.pop(context_key, None) is None:
            raise CSVServiceError(f"No hay datos cargados en {context_key}.")

    # ========================================================
    #  EXPORTACIÓN A EXCEL
    # ========================================================
    @staticmethod
    def _sheet_name(key: str, used: set) -> str:
        clean = "".join('_' if c in CSVController.SHEET_FORBIDDEN else c for c in key) or 'hoja'
        name = clean[:CSVController.SHEET_MAX_LEN]
        suffix = 1
        # Excel compara nombres de hoja sin distinguir mayúsculas
        while name.lower() in used:
            suffix += 1
            tag = f"_{suffix}"
            name = clean[:CSVController.SHEET_MAX_LEN - len(tag)] + tag
        used.add(name.lower())
        return name

    def export_report(self, filename: str, context_keys: Optional[List[str]] = None) -> None:
        keys = context_keys if context_keys is not None else self.get_contexts()
        if not keys:
            raise CSVServiceError("No hay contextos para exportar.")
        frames = {key: self.get_view(key).to_dataframe() for key in keys}

        try:
            with pd.ExcelWriter(filename, engine='openpyxl') as writer:
                used = set()
                for key, df in frames.items():
                    sheet_name = self._sheet_name(key, used)
                    df.to_excel(writer, sheet_name=sheet_name, index=False)

                for sheet_name in writer.sheets:
                    sheet = writer.sheets[sheet_name]
                    for cell in sheet[1]:
                        cell.font = Font(bold=True)
                    for column in sheet.columns:
                        column = [cell for cell in column]
                        max_length = max(len(str(cell.value)) if cell.value is not None else 0 for cell in column)
                        sheet.column_dimensions[column[0].column_letter].width = max_length + 2
        except (OSError, ValueError) as e:
            raise CSVServiceError(f"No se pudo exportar a {filename}: {e}") from e
        logger.info("Exportados %d contextos a %s", len(frames), filename)
