import hashlib
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List

import pandas as pd

from .config import Config
from .schema import ExtractionPayload


class FileParseError(Exception):
    """The whole source file could not be decoded into rows."""

    def __init__(self, message: str = Config.PARSE_ERROR_MESSAGE):
        super().__init__(message)


class BaseParser(ABC):
    @abstractmethod
    def read_frame(self, file_path: str) -> pd.DataFrame:
        pass

    def parse(self, file_path: str) -> ExtractionPayload:
        """
        Returns:
        {
            "document_hash": "...",
            "rows": [{"Data": "01/01/2024", "Jogo": "Roleta ao Vivo", ...}, ...],
            "source_file": "...",
            "sheet_name": None
        }
        """
        logging.info(f"Extracting rows: {file_path}")
        try:
            df = self.read_frame(file_path)
            file_hash = self.get_file_hash(file_path)
        except Exception as e:
            logging.exception(f"PARSE_ERROR {file_path}")
            raise FileParseError() from e

        return {
            "document_hash": file_hash,
            "rows": self.to_rows(df),
            "source_file": file_path,
            "sheet_name": getattr(self, "sheet_name", None),
        }

    def to_rows(self, df: pd.DataFrame) -> List[Dict[str, Any]]:
        # Blank cells (NaN/NaT) become None so rows read like sparse sheet JSON
        df = df.astype(object).where(pd.notna(df), None)
        return df.to_dict(orient="records")

    def get_file_hash(self, file_path: str) -> str:
        sha256_hash = hashlib.sha256()
        with open(file_path, "rb") as f:
            for byte_block in iter(lambda: f.read(4096), b""):
                sha256_hash.update(byte_block)
        return sha256_hash.hexdigest()


class CSVParser(BaseParser):
    def read_frame(self, file_path: str) -> pd.DataFrame:
        # Exports come comma- or semicolon-separated; sniff the delimiter
        return pd.read_csv(file_path, sep=None, engine="python", encoding="utf-8-sig")


class ExcelParser(BaseParser):
    # Legacy .xls workbooks need xlrd; openpyxl reads xlsx only
    ENGINES = {"xlsx": "openpyxl", "xls": "xlrd"}

    def __init__(self, sheet_name=0, file_type: str = "xlsx"):
        self.sheet_name = sheet_name
        self.engine = self.ENGINES[file_type]

    def read_frame(self, file_path: str) -> pd.DataFrame:
        return pd.read_excel(file_path, sheet_name=self.sheet_name, engine=self.engine)


class ParserFactory:
    @staticmethod
    def get_parser(file_type: str) -> BaseParser:
        ft = file_type.lower().lstrip('.')
        if ft not in Config.ALLOWED_EXTENSIONS:
            raise ValueError(f"Unsupported file type: {file_type}")
        if ft == 'csv':
            return CSVParser()
        return ExcelParser(file_type=ft)
