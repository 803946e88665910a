# =============================================================================
# utils/config.py - Configuration management
# =============================================================================

import importlib.util
import os
from pathlib import Path
from typing import Optional, List
from dotenv import load_dotenv


DEFAULT_OUTPUT_DIR = Path.home() / "Desktop" / "MicrosoftAnalyzerSuite" / "AuthenticationMethods"

# Import names of libraries the XLSX export cannot run without
REQUIRED_MODULES = ["pandas", "openpyxl"]


class Config:
    """Configuration management"""

    def __init__(self):
        load_dotenv()

    @property
    def output_dir(self) -> Path:
        value = os.getenv("ANALYZER_OUTPUT_DIR")
        return Path(value) if value else DEFAULT_OUTPUT_DIR

    @property
    def log_level(self) -> str:
        return os.getenv("ANALYZER_LOG_LEVEL", "INFO").upper()

    @property
    def input_path(self) -> Optional[str]:
        return os.getenv("ANALYZER_INPUT_PATH")

    def get_missing_dependencies(self) -> List[str]:
        """Get list of required libraries that cannot be imported"""
        return [name for name in REQUIRED_MODULES if importlib.util.find_spec(name) is None]
