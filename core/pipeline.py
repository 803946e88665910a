# =============================================================================
# core/pipeline.py - One analysis run over an export pair
# =============================================================================

import csv
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from core.models import AuthenticationMethodStats, RegistrationStats
from processors.authentication_methods import AuthenticationMethodsProcessor
from processors.user_registration_details import UserRegistrationDetailsProcessor

AUTHENTICATION_METHODS_MARKER = 'AuthenticationMethods'
USER_REGISTRATION_DETAILS_MARKER = 'UserRegistrationDetails'


def derive_registration_details_path(input_csv: Union[str, Path]) -> Optional[Path]:
    """Companion export path, or None when the input path carries no marker"""
    input_str = str(input_csv)
    if AUTHENTICATION_METHODS_MARKER not in input_str:
        return None
    return Path(input_str.replace(AUTHENTICATION_METHODS_MARKER, USER_REGISTRATION_DETAILS_MARKER))


@dataclass
class AnalysisResult:
    """Outcome of one run"""
    authentication_methods: AuthenticationMethodStats
    registration_details: Optional[RegistrationStats] = None
    registration_details_path: Optional[Path] = None


class AnalysisRun:
    """Working set of a single invocation: both exports and their Stats tables"""

    def __init__(self, input_csv: Union[str, Path], output_dir: Union[str, Path]):
        self.input_csv = Path(input_csv)
        self.output_dir = Path(output_dir)
        self.logger = logging.getLogger(self.__class__.__name__)

    def prepare_output(self, clean: bool = True) -> None:
        """Create the output tree, removing results of a previous run"""
        for name in ('CSV', 'XLSX', 'Stats'):
            target = self.output_dir / name
            if clean and target.exists():
                self.logger.info(f"Removing previous results in {target}")
                shutil.rmtree(target)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def run(self) -> AnalysisResult:
        """Process the Authentication Methods export, then its companion"""
        self.prepare_output()

        am_processor = AuthenticationMethodsProcessor()
        _records, am_stats = am_processor.process_export(self.input_csv, self.output_dir)
        result = AnalysisResult(authentication_methods=am_stats)

        companion = derive_registration_details_path(self.input_csv)
        if companion is None or not companion.exists():
            self.logger.error(f"User Registration Details export not found "
                              f"({companion or 'no AuthenticationMethods marker in input path'}) - "
                              f"section skipped")
            return result

        result.registration_details_path = companion
        urd_processor = UserRegistrationDetailsProcessor()
        try:
            _records, result.registration_details = urd_processor.process_export(companion, self.output_dir)
        except (OSError, ValueError, csv.Error) as e:
            # Authentication Methods output already written stays in place
            self.logger.error(f"User Registration Details section failed: {e}")

        return result
