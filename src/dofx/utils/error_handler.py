"""Error handling and logging for dofx file processing."""

import json
import logging
import traceback
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, asdict
import sys


class ErrorSeverity(Enum):
    """Error severity levels"""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories for classification"""
    FILE_ACCESS = "file_access"
    DATA_PARSING = "data_parsing"
    SYSTEM = "system"


@dataclass
class ErrorDetail:
    """Detailed error information"""
    timestamp: str
    severity: str
    category: str
    error_code: str
    message: str
    file_path: Optional[str] = None
    line_number: Optional[int] = None
    raw_value: Optional[str] = None
    stack_trace: Optional[str] = None
    context: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return asdict(self)


@dataclass
class ProcessingProgress:
    """Progress tracking for a multi-file run"""
    total_files: int
    processed_files: int
    successful_files: int
    failed_files: int
    skipped_files: int
    current_file: Optional[str] = None
    start_time: Optional[datetime] = None

    @property
    def completion_percentage(self) -> float:
        """Calculate completion percentage"""
        if self.total_files == 0:
            return 0.0
        return (self.processed_files / self.total_files) * 100

    @property
    def success_rate(self) -> float:
        """Calculate success rate"""
        if self.processed_files == 0:
            return 0.0
        return (self.successful_files / self.processed_files) * 100

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_files': self.total_files,
            'processed_files': self.processed_files,
            'successful_files': self.successful_files,
            'failed_files': self.failed_files,
            'skipped_files': self.skipped_files,
            'current_file': self.current_file,
            'start_time': self.start_time.isoformat() if self.start_time else None,
            'completion_percentage': self.completion_percentage,
            'success_rate': self.success_rate
        }


class JSONFormatter(logging.Formatter):
    """Formats log records as single-line JSON objects"""

    def format(self, record):
        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        # Add extra fields if present
        for attribute in ('error_code', 'file_path', 'category', 'context'):
            if hasattr(record, attribute):
                log_entry[attribute] = getattr(record, attribute)

        return json.dumps(log_entry, default=str)


class ErrorHandler:
    """Collects errors and warnings raised while processing files"""

    def __init__(self, log_directory: Optional[str] = None, enable_console: bool = True):
        """
        Args:
            log_directory: Directory for JSON-lines log files; None disables file logging
            enable_console: Echo INFO and above to stdout
        """
        self.log_directory = Path(log_directory) if log_directory else None
        if self.log_directory is not None:
            self.log_directory.mkdir(parents=True, exist_ok=True)

        self.errors: List[ErrorDetail] = []
        self.warnings: List[ErrorDetail] = []
        self.progress: Optional[ProcessingProgress] = None

        self._setup_logging(enable_console)

        self.error_codes = {
            # File access errors
            "FILE_NOT_FOUND": "F001",
            "FILE_PERMISSION_DENIED": "F002",
            "ENCODING_ERROR": "F105",

            # Data parsing errors
            "DATE_PARSE_ERROR": "D001",

            "UNEXPECTED_ERROR": "S999"
        }

    def _setup_logging(self, enable_console: bool):
        """Set up console and optional JSON file logging"""
        self.logger = logging.getLogger('dofx.errors')
        self.logger.setLevel(logging.DEBUG)
        # Without a console handler, records go to the root logger instead
        self.logger.propagate = not enable_console

        # Clear existing handlers
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        if enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(logging.INFO)
            console_handler.setFormatter(logging.Formatter(
                '%(asctime)s - %(levelname)s - %(message)s'
            ))
            self.logger.addHandler(console_handler)

        if self.log_directory is not None:
            log_file = self.log_directory / f"dofx_{datetime.now().strftime('%Y%m%d')}.jsonl"
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(JSONFormatter())
            self.logger.addHandler(file_handler)

            error_file = self.log_directory / f"errors_{datetime.now().strftime('%Y%m%d')}.jsonl"
            error_handler = logging.FileHandler(error_file)
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(JSONFormatter())
            self.logger.addHandler(error_handler)

        if not self.logger.handlers:
            self.logger.addHandler(logging.NullHandler())

    def close(self):
        """Release log file handles"""
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

    def log_error(self,
                  message: str,
                  error_type: str,
                  category: ErrorCategory = ErrorCategory.SYSTEM,
                  file_path: Optional[str] = None,
                  line_number: Optional[int] = None,
                  raw_value: Optional[str] = None,
                  exception: Optional[BaseException] = None,
                  context: Optional[Dict[str, Any]] = None) -> ErrorDetail:
        """Log an error with detailed information"""

        error_code = self.error_codes.get(error_type, "S999")
        stack_trace = None

        if exception:
            stack_trace = ''.join(traceback.format_exception(
                type(exception), exception, exception.__traceback__
            ))

        error_detail = ErrorDetail(
            timestamp=datetime.now().isoformat(),
            severity=ErrorSeverity.ERROR.value,
            category=category.value,
            error_code=error_code,
            message=message,
            file_path=file_path,
            line_number=line_number,
            raw_value=raw_value,
            stack_trace=stack_trace,
            context=context or {}
        )

        self.errors.append(error_detail)

        self.logger.error(
            message,
            extra={
                'error_code': error_code,
                'category': category.value,
                'file_path': file_path,
                'context': context or {}
            }
        )

        return error_detail

    def log_warning(self,
                    message: str,
                    warning_type: str,
                    category: ErrorCategory = ErrorCategory.SYSTEM,
                    file_path: Optional[str] = None,
                    context: Optional[Dict[str, Any]] = None) -> ErrorDetail:
        """Log a warning with detailed information"""

        warning_code = self.error_codes.get(warning_type, "W999")

        warning_detail = ErrorDetail(
            timestamp=datetime.now().isoformat(),
            severity=ErrorSeverity.WARNING.value,
            category=category.value,
            error_code=warning_code,
            message=message,
            file_path=file_path,
            context=context or {}
        )

        self.warnings.append(warning_detail)

        self.logger.warning(
            message,
            extra={
                'error_code': warning_code,
                'category': category.value,
                'file_path': file_path,
                'context': context or {}
            }
        )

        return warning_detail

    def log_info(self, message: str, context: Optional[Dict[str, Any]] = None):
        """Log informational message"""
        self.logger.info(message, extra={'context': context or {}})

    def log_debug(self, message: str, context: Optional[Dict[str, Any]] = None):
        """Log debug message"""
        self.logger.debug(message, extra={'context': context or {}})

    def start_progress_tracking(self, total_files: int) -> ProcessingProgress:
        """Start tracking progress for a multi-file run"""
        self.progress = ProcessingProgress(
            total_files=total_files,
            processed_files=0,
            successful_files=0,
            failed_files=0,
            skipped_files=0,
            start_time=datetime.now()
        )

        self.log_debug(f"Starting run over {total_files} files")
        return self.progress

    def update_progress(self,
                        current_file: Optional[str] = None,
                        success: Optional[bool] = None,
                        skipped: bool = False):
        """Update progress tracking"""
        if not self.progress:
            return

        if current_file:
            self.progress.current_file = current_file

        if success is not None or skipped:
            self.progress.processed_files += 1

            if skipped:
                self.progress.skipped_files += 1
            elif success:
                self.progress.successful_files += 1
            else:
                self.progress.failed_files += 1

    def get_error_summary(self) -> Dict[str, Any]:
        """Get summary of all errors and warnings"""
        errors_by_category: Dict[str, int] = {}
        warnings_by_category: Dict[str, int] = {}

        for error in self.errors:
            errors_by_category[error.category] = errors_by_category.get(error.category, 0) + 1

        for warning in self.warnings:
            warnings_by_category[warning.category] = warnings_by_category.get(warning.category, 0) + 1

        return {
            'total_errors': len(self.errors),
            'total_warnings': len(self.warnings),
            'errors_by_category': errors_by_category,
            'warnings_by_category': warnings_by_category,
            'files_with_errors': len(set(e.file_path for e in self.errors if e.file_path)),
            'progress': self.progress.to_dict() if self.progress else None
        }


# Convenience functions for common error scenarios
def handle_file_access_error(error_handler: ErrorHandler,
                             file_path: str,
                             exception: BaseException) -> ErrorDetail:
    """Handle common file access errors"""
    if isinstance(exception, FileNotFoundError):
        return error_handler.log_error(
            f"File not found: {file_path}",
            "FILE_NOT_FOUND",
            ErrorCategory.FILE_ACCESS,
            file_path=file_path,
            exception=exception
        )
    elif isinstance(exception, PermissionError):
        return error_handler.log_error(
            f"Permission denied accessing file: {file_path}",
            "FILE_PERMISSION_DENIED",
            ErrorCategory.FILE_ACCESS,
            file_path=file_path,
            exception=exception
        )
    elif isinstance(exception, (UnicodeDecodeError, UnicodeEncodeError, LookupError)):
        return error_handler.log_error(
            f"Encoding error in {file_path}: {exception}",
            "ENCODING_ERROR",
            ErrorCategory.FILE_ACCESS,
            file_path=file_path,
            exception=exception
        )
    else:
        return error_handler.log_error(
            f"File access error: {str(exception)}",
            "UNEXPECTED_ERROR",
            ErrorCategory.FILE_ACCESS,
            file_path=file_path,
            exception=exception
        )


def handle_parsing_error(error_handler: ErrorHandler,
                         file_path: str,
                         raw_value: str,
                         expected_format: str,
                         line_number: Optional[int] = None) -> ErrorDetail:
    """Record a value that could not be parsed as expected"""
    return error_handler.log_warning(
        f"Failed to parse '{raw_value}' (expected format: {expected_format})"
        + (f" at line {line_number}" if line_number is not None else ""),
        "DATE_PARSE_ERROR",
        ErrorCategory.DATA_PARSING,
        file_path=file_path,
        context={'raw_value': raw_value, 'line_number': line_number}
    )
