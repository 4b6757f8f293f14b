"""Utility functions and helpers"""

from .config_manager import ConfigManager, ConfigError
from .error_handler import ErrorHandler, ErrorCategory, ErrorSeverity, handle_file_access_error, handle_parsing_error
from .line_io import cleaned_output_path, open_line_source, open_line_sink
from .token_generator import FitIdGenerator

__all__ = [
    'ConfigManager',
    'ConfigError',
    'ErrorHandler',
    'ErrorCategory',
    'ErrorSeverity',
    'handle_file_access_error',
    'handle_parsing_error',
    'cleaned_output_path',
    'open_line_source',
    'open_line_sink',
    'FitIdGenerator',
]
