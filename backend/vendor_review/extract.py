import pandas as pd
import hashlib
import logging
from abc import ABC, abstractmethod

from .schema import ExtractionPayload


class BaseParser(ABC):
    @abstractmethod
    def parse(self, file_path: str) -> ExtractionPayload:
        pass

    def get_file_hash(self, file_path: str) -> str:
        sha256_hash = hashlib.sha256()
        with open(file_path, "rb") as f:
            for byte_block in iter(lambda: f.read(4096), b""):
                sha256_hash.update(byte_block)
        return sha256_hash.hexdigest()


class CSVParser(BaseParser):
    def parse(self, file_path: str) -> ExtractionPayload:
        """
        Every column is read as text and empty cells stay "" (not NaN),
        so a blank interchange cell is still distinguishable from "0".
        An empty file is an empty export, and bytes that are not UTF-8 are
        replaced rather than failing the whole upload.
        """
        logging.info(f"Reading transaction export: {file_path}")
        try:
            df = pd.read_csv(file_path, dtype=str, keep_default_na=False,
                             skipinitialspace=True, encoding_errors="replace")
        except pd.errors.EmptyDataError:
            logging.warning(f"Export is empty: {file_path}")
            rows: list = []
        else:
            df.columns = [str(c).strip() for c in df.columns]
            rows = df.to_dict(orient="records")

        return {
            "document_hash": self.get_file_hash(file_path),
            "rows": rows,
            "source_file": file_path,
        }


class ParserFactory:
    @staticmethod
    def get_parser(file_type: str) -> BaseParser:
        ft = file_type.lower()
        if ft == 'csv':
            return CSVParser()
        else:
            raise ValueError(f"Unsupported file type: {file_type}")
