# =============================================================================
# core/base_processor.py - Abstract export processor
# =============================================================================

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Dict, Any, Optional, Tuple, Union
import logging

from utils.csv_utils import CSVHandler
from utils.excel_utils import ExcelHandler


def to_bool(value: Optional[str]) -> bool:
    """Parse the 'True'/'False' encoding used by the exports"""
    if value is None:
        return False
    return str(value).strip().lower() == 'true'


class BaseExportProcessor(ABC):
    """Abstract base class for Microsoft-Extractor-Suite export processors"""

    # File stem of the canonical CSV/XLSX outputs
    EXPORT_NAME = ''

    # Source column -> (output column, record attribute), and alternative source spellings
    COLUMN_MAP: Dict[str, Tuple[str, str]] = {}
    COLUMN_ALIASES: Dict[str, List[str]] = {}

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def create_record(self, row: Dict[str, str]) -> Any:
        """Create a canonical record from a raw CSV row"""
        pass

    @abstractmethod
    def record_to_dict(self, record: Any) -> Dict[str, Any]:
        """Convert a canonical record to a dictionary for CSV output"""
        pass

    @abstractmethod
    def get_output_fieldnames(self) -> List[str]:
        """Get fieldnames for CSV output"""
        pass

    @abstractmethod
    def calculate_stats(self, records: List[Any]) -> Any:
        """Aggregate the canonical records"""
        pass

    @abstractmethod
    def log_statistics(self, stats: Any) -> None:
        """Log the aggregated statistics"""
        pass

    @abstractmethod
    def export_statistics(self, stats: Any, output_dir: Path) -> List[Path]:
        """Write the Stats tables for this export"""
        pass

    def process_export(self, input_csv: Union[str, Path], output_dir: Path) -> Tuple[List[Any], Any]:
        """Main processing workflow: read, normalize, export, aggregate"""
        self.logger.info(f"Starting {self.__class__.__name__} processing workflow")

        try:
            csv_data, headers = CSVHandler.read_csv(input_csv)

            ignored = self.unmapped_columns(headers)
            if ignored:
                self.logger.info(f"Ignoring unmapped columns: {ignored}")

            records = self.normalize_rows(csv_data)
            self.logger.info(f"Normalized {len(records)} records")

            self.export_records(records, output_dir)

            stats = self.calculate_stats(records)
            self.log_statistics(stats)
            self.export_statistics(stats, output_dir)

            return records, stats

        except Exception as e:
            self.logger.error(f"Processing failed: {e}")
            raise

    def unmapped_columns(self, headers: List[str]) -> List[str]:
        """Header names that no canonical field is read from"""
        known = set(self.COLUMN_MAP)
        for aliases in self.COLUMN_ALIASES.values():
            known.update(aliases)
        return [name for name in headers if name not in known]

    def normalize_rows(self, csv_data: List[Dict[str, str]]) -> List[Any]:
        """Normalize every raw row in input order"""
        return [self.create_record(row) for row in csv_data]

    def export_records(self, records: List[Any], output_dir: Path) -> Optional[Path]:
        """Write canonical records as CSV and XLSX"""
        output_data = [self.record_to_dict(record) for record in records]
        return self.export_table(output_data, self.get_output_fieldnames(), self.EXPORT_NAME,
                                 output_dir / 'CSV', output_dir / 'XLSX')

    def export_table(self, data: List[Dict[str, Any]], fieldnames: List[str], name: str,
                     csv_dir: Path, xlsx_dir: Path) -> Optional[Path]:
        """Write one table as <csv_dir>/<name>.csv with an XLSX counterpart"""
        csv_dir.mkdir(parents=True, exist_ok=True)
        xlsx_dir.mkdir(parents=True, exist_ok=True)

        csv_path = csv_dir / f"{name}.csv"
        if not CSVHandler.write_csv(data, csv_path, fieldnames):
            return None

        ExcelHandler.csv_to_xlsx(csv_path, xlsx_dir / f"{name}.xlsx", sheet_name=name)
        return csv_path
