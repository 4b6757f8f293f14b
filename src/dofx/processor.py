"""Per-file orchestration of the statistics and resolver passes."""

import logging
import os
import time
from pathlib import Path
from typing import Callable, List, Optional

from .models.core import DateRange, DofxConfig, ProcessingResult
from .scanners.stats_collector import StatsCollector
from .scanners.duplicate_resolver import DuplicateResolver
from .scanners.range_resolver import RangeResolver
from .utils.error_handler import ErrorHandler, handle_file_access_error, handle_parsing_error
from .utils.line_io import cleaned_output_path, open_line_source, open_line_sink
from .utils.token_generator import FitIdGenerator


logger = logging.getLogger(__name__)

# Failures that end processing of a single file
FILE_ERRORS = (OSError, UnicodeError, LookupError)


class FileProcessor:
    """Runs one pass per file with scoped input/output handles.

    Every file is opened, processed, flushed and closed before the next one
    starts. What happens after a failed file is governed by
    config.error_policy: 'abort' stops the run, 'continue' moves on.
    """

    def __init__(self,
                 config: Optional[DofxConfig] = None,
                 error_handler: Optional[ErrorHandler] = None,
                 generator: Optional[FitIdGenerator] = None):
        self.config = config or DofxConfig()
        self.error_handler = error_handler or ErrorHandler(
            log_directory=self.config.log_directory, enable_console=False
        )
        # One generator for the whole run, seeded once
        self.generator = generator or FitIdGenerator(
            length=self.config.fitid_length,
            alphabet=self.config.fitid_alphabet,
            seed=self.config.seed
        )

    def _date_warning_callback(self, file_path: str):
        def on_malformed(raw_value: str, line_number: Optional[int]):
            handle_parsing_error(self.error_handler, file_path, raw_value, "YYYYMMDD", line_number)
        return on_malformed

    def collect_stats(self, file_path: str) -> ProcessingResult:
        """Run the statistics pass over one file"""
        start_time = time.time()
        collector = StatsCollector(
            report_order=self.config.report_order,
            on_malformed_date=self._date_warning_callback(file_path)
        )

        try:
            with open_line_source(file_path, self.config.encoding) as source:
                report = collector.run(source)
        except FILE_ERRORS as e:
            detail = handle_file_access_error(self.error_handler, file_path, e)
            return ProcessingResult(
                file_path=file_path,
                command='stats',
                success=False,
                processing_time=time.time() - start_time,
                errors=[detail.message]
            )

        logger.debug(f"Read {report.lines_read} lines from {file_path}")
        return ProcessingResult(
            file_path=file_path,
            command='stats',
            success=True,
            processing_time=time.time() - start_time,
            report=report
        )

    def clean(self, file_path: str) -> ProcessingResult:
        """Rewrite duplicate FITIDs into a sibling output file"""
        resolver = DuplicateResolver(
            generator=self.generator,
            on_malformed_date=self._date_warning_callback(file_path)
        )
        return self._rewrite(file_path, 'clean', resolver)

    def clean_range(self, file_path: str, date_range: DateRange) -> ProcessingResult:
        """Rewrite FITIDs posted inside date_range into a sibling output file"""
        resolver = RangeResolver(
            date_range,
            generator=self.generator,
            on_malformed_date=self._date_warning_callback(file_path)
        )
        return self._rewrite(file_path, 'clean-range', resolver)

    def _rewrite(self, file_path: str, command: str, resolver) -> ProcessingResult:
        start_time = time.time()
        output_path = cleaned_output_path(file_path, self.config.output_suffix)
        output_created = False
        try:
            with open_line_source(file_path, self.config.encoding) as source:
                with open_line_sink(output_path, self.config.encoding) as sink:
                    output_created = True
                    resolve_result = resolver.run(source, sink)
        except FILE_ERRORS as e:
            detail = handle_file_access_error(self.error_handler, file_path, e)
            if output_created:
                self._remove_partial_output(output_path)
            return ProcessingResult(
                file_path=file_path,
                command=command,
                success=False,
                processing_time=time.time() - start_time,
                errors=[detail.message]
            )

        self.error_handler.log_info(
            f"Wrote {resolve_result.lines_written} lines to {output_path} "
            f"({resolve_result.substitution_count} fitids replaced)",
            context={
                'file_path': file_path,
                'output_file': str(output_path),
                'substitutions': resolve_result.substitution_count
            }
        )
        return ProcessingResult(
            file_path=file_path,
            command=command,
            success=True,
            processing_time=time.time() - start_time,
            output_file=str(output_path),
            resolve_result=resolve_result
        )

    def _remove_partial_output(self, output_path: Path):
        try:
            os.remove(output_path)
            logger.debug(f"Removed partial output {output_path}")
        except FileNotFoundError:
            pass

    def process_file(self,
                     command: str,
                     file_path: str,
                     date_range: Optional[DateRange] = None) -> ProcessingResult:
        if command == 'stats':
            return self.collect_stats(file_path)
        if command == 'clean':
            return self.clean(file_path)
        if command == 'clean-range':
            if date_range is None:
                raise ValueError("clean-range requires a date range")
            return self.clean_range(file_path, date_range)
        raise ValueError(f"Unknown command: {command}")

    def process_files(self,
                      command: str,
                      file_paths: List[str],
                      date_range: Optional[DateRange] = None,
                      on_result: Optional[Callable[[ProcessingResult], None]] = None
                      ) -> List[ProcessingResult]:
        """Process files in order, applying the configured error policy

        Args:
            command: stats, clean or clean-range
            file_paths: Files to process, in order
            date_range: Required for clean-range
            on_result: Called with each result as soon as its file is done

        Returns:
            Results for every file attempted
        """
        results = []
        self.error_handler.start_progress_tracking(len(file_paths))

        for file_path in file_paths:
            self.error_handler.update_progress(current_file=file_path)
            result = self.process_file(command, file_path, date_range)
            results.append(result)
            self.error_handler.update_progress(success=result.success)

            if on_result is not None:
                on_result(result)

            if not result.success and self.config.error_policy == 'abort':
                remaining = file_paths[len(results):]
                if remaining:
                    logger.warning(f"Aborting run, {len(remaining)} file(s) not processed")
                for skipped_path in remaining:
                    self.error_handler.update_progress(current_file=skipped_path, skipped=True)
                break

        return results
