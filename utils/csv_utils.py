# =============================================================================
# utils/csv_utils.py - CSV utilities
# =============================================================================

import csv
from pathlib import Path
from typing import List, Dict, Any, Optional, Tuple, Union
import logging


class CSVHandler:
    """Utilities for reading and writing CSV files"""

    @staticmethod
    def read_csv(file_path: Union[str, Path], encoding: str = 'utf-8-sig',
                 delimiter: str = ',') -> Tuple[List[Dict[str, str]], List[str]]:
        """Read CSV file and return list of dictionaries plus the header row"""
        logger = logging.getLogger(__name__)

        try:
            with open(file_path, 'r', newline='', encoding=encoding) as file:
                dict_reader = csv.DictReader(file, delimiter=delimiter)
                if dict_reader.fieldnames is None:
                    raise ValueError(f"{file_path} has no header row")

                headers = [name.strip() for name in dict_reader.fieldnames]
                dict_reader.fieldnames = headers

                logger.debug(f"CSV Headers: {headers[:10]}...")  # First 10 headers
                logger.debug(f"Total columns: {len(headers)}")

                data = list(dict_reader)

                logger.info(f"Successfully read {len(data)} records from {file_path}")
                return data, headers

        except FileNotFoundError:
            logger.error(f"Input file {file_path} not found")
            raise
        except Exception as e:
            logger.error(f"Error reading CSV: {e}")
            raise

    @staticmethod
    def write_csv(data: List[Dict[str, Any]], output_path: Union[str, Path],
                  fieldnames: Optional[List[str]] = None) -> bool:
        """Write data to CSV file, returns False when there was nothing to write"""
        logger = logging.getLogger(__name__)

        if not data:
            logger.warning(f"No data to write - {output_path} not created")
            return False

        if fieldnames is None:
            fieldnames = list(data[0].keys())

        try:
            with open(output_path, 'w', newline='', encoding='utf-8') as file:
                writer = csv.DictWriter(file, fieldnames=fieldnames)
                writer.writeheader()
                writer.writerows(data)

            logger.info(f"Successfully wrote {len(data)} records to {output_path}")
            return True

        except Exception as e:
            logger.error(f"Error writing CSV: {e}")
            raise
