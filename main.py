# =============================================================================
# main.py - CLI entry point
# =============================================================================

import argparse
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from utils.config import Config


def setup_logging(level: str = "INFO", log_dir: Optional[Path] = None) -> Optional[str]:
    """Setup logging configuration with console output and a transcript file"""
    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Clear any existing handlers
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, level.upper()))
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_dir is None:
        return None

    log_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_filename = log_dir / f"Transcript_{timestamp}.log"

    # Always log DEBUG to the transcript
    file_handler = logging.FileHandler(log_filename, encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging initialized - Console: {level.upper()}, File: DEBUG")
    logger.info(f"Log file: {log_filename}")

    return str(log_filename)


def validate_output_dir(value: str) -> Optional[str]:
    """Return an error message when the output argument is malformed"""
    if not value or not value.strip():
        return "Output directory must not be empty"
    if value.endswith(("/", "\\")):
        return f"Output directory must not end with a path separator: {value}"
    if Path(value).exists() and not Path(value).is_dir():
        return f"Output path is an existing file: {value}"
    return None


def validate_input_path(value: Optional[str]) -> Optional[str]:
    """Return an error message when the input file cannot be used"""
    if not value or not value.strip():
        return "No input file given"
    if not Path(value).exists():
        return f"Input file not found: {value}"
    if Path(value).suffix.lower() != ".csv":
        return f"Input file is not a CSV file: {value}"
    return None


def prompt_for_input_path() -> str:
    """Ask for the Authentication Methods export on the console"""
    try:
        return input("Path to *-AuthenticationMethods.csv: ").strip().strip('"')
    except EOFError:
        return ""


def format_file_size(size: int) -> str:
    """Human readable size of the input file"""
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024 or unit == "GB":
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.2f} {unit}"
        size /= 1024


def main():
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(
        description="Authentication Methods Analyzer - MFA statistics from Microsoft-Extractor-Suite exports"
    )
    parser.add_argument('-p', '--path', help='Path to the *-AuthenticationMethods.csv export')
    parser.add_argument('-o', '--output', help='Output directory')
    parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Console logging level')

    args = parser.parse_args()

    config = Config()
    log_level = args.log_level or config.log_level

    # Configuration errors halt before anything is written
    setup_logging(log_level)
    logger = logging.getLogger(__name__)

    missing = config.get_missing_dependencies()
    if missing:
        logger.error(f"Missing required libraries: {missing}")
        sys.exit(1)

    output_arg = args.output if args.output is not None else str(config.output_dir)
    error = validate_output_dir(output_arg)
    if error:
        logger.error(error)
        sys.exit(1)
    output_dir = Path(output_arg)

    input_path = args.path or config.input_path or prompt_for_input_path()
    error = validate_input_path(input_path)
    if error:
        logger.error(error)
        sys.exit(1)

    setup_logging(log_level, output_dir)
    logger = logging.getLogger(__name__)

    start = datetime.now()
    logger.info(f"Analysis started: {start:%Y-%m-%d %H:%M:%S}")
    logger.info(f"Input file: {input_path} ({format_file_size(os.path.getsize(input_path))})")
    logger.info(f"Output directory: {output_dir}")

    # Imported after the dependency check, pulls in pandas/openpyxl
    from core.pipeline import AnalysisRun

    try:
        result = AnalysisRun(input_path, output_dir).run()
    except Exception as e:
        logger.error(f"Processing failed: {e}")
        sys.exit(1)

    if result.registration_details is None:
        logger.warning("User Registration Details section was not completed")

    elapsed = datetime.now() - start
    logger.info(f"Analysis finished: {datetime.now():%Y-%m-%d %H:%M:%S} (elapsed {elapsed})")


if __name__ == "__main__":
    main()
