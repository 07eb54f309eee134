"""EmlRouter -- file-level orchestrator and public API for emlkit.

Routes email files through: security scan, reading, conversion, and
warning collection.  Batches are processed one file at a time in input
order.
"""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path
from typing import Callable, Iterable

from emlkit.assembler import render_markdown
from emlkit.charset import CharsetDecoder
from emlkit.config import EmlConverterConfig
from emlkit.converter import EMLConverter
from emlkit.errors import ConversionIssue, ErrorCode, ParseError
from emlkit.models import (
    BatchResult,
    BodySource,
    ConvertedFile,
    EmailData,
    EmailMetadata,
    ProcessingResult,
)
from emlkit.packaging import markdown_filename
from emlkit.security import EmlSecurityScanner

logger = logging.getLogger("emlkit")


def read_text(data: bytes) -> str:
    """Decode file bytes as UTF-8, keeping undecodable bytes recoverable."""
    return data.decode("utf-8", "surrogateescape")


class EmlRouter:
    """Top-level orchestrator for converting ``.eml`` files.

    Parameters
    ----------
    config:
        Pipeline configuration. Uses defaults when *None*.
    decoder:
        Charset collaborator. Uses the codec registry when *None*.
    """

    def __init__(
        self,
        config: EmlConverterConfig | None = None,
        decoder: CharsetDecoder | None = None,
    ) -> None:
        self._config = config or EmlConverterConfig()
        self._security_scanner = EmlSecurityScanner(self._config)
        self._converter = EMLConverter(self._config, decoder)

    @property
    def config(self) -> EmlConverterConfig:
        return self._config

    def can_handle(self, file_path: str) -> bool:
        """Return True if *file_path* names an ``.eml`` file."""
        return os.path.splitext(file_path)[1].lower() == ".eml"

    def convert_text(self, raw_text: str, filename: str) -> ConvertedFile:
        """Convert in-memory message text.

        Raises
        ------
        ParseError
            If the message cannot be converted.
        """
        _, converted = self._convert(raw_text, filename)
        return converted

    def process(self, file_path: str) -> ProcessingResult:
        """Convert a single file, reporting failures instead of raising.

        Parameters
        ----------
        file_path:
            Filesystem path to the ``.eml`` file.

        Returns
        -------
        ProcessingResult
            The converted document plus metadata, warnings and errors.
        """
        overall_start = time.monotonic()
        filename = os.path.basename(file_path)

        # ==============================================================
        # Step 1: Security Scan
        # ==============================================================
        fatal_errors = [
            e for e in self._security_scanner.scan(file_path) if e.code.value.startswith("E_")
        ]
        if fatal_errors:
            logger.error(
                "emlkit | file=%s | code=%s | detail=%s",
                filename,
                fatal_errors[0].code.value,
                fatal_errors[0].message,
            )
            return self._failed(file_path, fatal_errors, overall_start)

        # ==============================================================
        # Step 2: Read and Convert
        # ==============================================================
        try:
            raw_text = read_text(Path(file_path).read_bytes())
            email_data, converted = self._convert(raw_text, filename)
        except OSError as exc:
            err = ConversionIssue(
                code=ErrorCode.E_EML_FILE_CORRUPT,
                message=f"Cannot read file: {exc}",
                stage="read",
                filename=filename,
            )
            return self._failed(file_path, [err], overall_start)
        except ParseError as exc:
            return self._failed(file_path, [exc.to_issue()], overall_start)

        # ==============================================================
        # Step 3: Collect Warnings and Assemble Result
        # ==============================================================
        warning_details = self._collect_warnings(email_data, filename)
        elapsed = time.monotonic() - overall_start

        logger.info(
            "emlkit | file=%s | source=%s | warnings=%d | time=%.3fs",
            filename,
            email_data.body_source.value,
            len(warning_details),
            elapsed,
        )

        return ProcessingResult(
            file_path=file_path,
            converted=converted,
            email_metadata=self._build_metadata(email_data),
            warnings=[w.code.value for w in warning_details],
            error_details=warning_details,
            processing_time_seconds=elapsed,
        )

    def convert_batch(self, items: Iterable[tuple[str, bytes | str]]) -> BatchResult:
        """Convert ``(filename, content)`` pairs in input order.

        Names that are not ``.eml`` are skipped.  Each file is independent:
        a failure is recorded in ``failures`` and the batch continues.  With
        ``config.stop_on_error`` the first failure is raised instead and no
        result is returned.

        Raises
        ------
        ParseError
            Only when ``config.stop_on_error`` is set.
        """
        return self._run_batch(
            (filename, lambda payload=payload: payload) for filename, payload in items
        )

    def convert_paths(self, paths: Iterable[str | Path]) -> BatchResult:
        """Read files from disk and convert them like :meth:`convert_batch`.

        A file that cannot be read is recorded as an ``E_EML_FILE_CORRUPT``
        failure.
        """
        return self._run_batch(
            (Path(path).name, lambda path=Path(path): _read_path(path)) for path in paths
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _run_batch(
        self, loaders: Iterable[tuple[str, Callable[[], bytes | str]]]
    ) -> BatchResult:
        result = BatchResult()

        for filename, load in loaders:
            if not self.can_handle(filename):
                logger.debug("emlkit | file=%s | code=%s", filename, ErrorCode.W_EML_SKIPPED_NOT_EML.value)
                result.skipped.append(filename)
                continue

            try:
                payload = load()
                size_issues = self._security_scanner.check_size(len(payload), filename)
                if size_issues:
                    raise ParseError(filename, size_issues[0].message, size_issues[0].code)
                raw_text = read_text(payload) if isinstance(payload, bytes) else payload
                result.converted.append(self.convert_text(raw_text, filename))
            except ParseError as exc:
                if self._config.stop_on_error:
                    raise
                logger.error(
                    "emlkit | file=%s | code=%s | detail=%s",
                    filename,
                    exc.code.value,
                    exc.reason,
                )
                stage = "read" if exc.code == ErrorCode.E_EML_FILE_CORRUPT else "convert"
                result.failures.append(exc.to_issue(stage))

        logger.info(
            "emlkit | batch | converted=%d | failed=%d | skipped=%d",
            len(result.converted),
            len(result.failures),
            len(result.skipped),
        )
        return result

    def _convert(self, raw_text: str, filename: str) -> tuple[EmailData, ConvertedFile]:
        email_data = self._converter.parse_checked(raw_text, filename)
        if self._config.log_sample_data:
            logger.debug("emlkit | file=%s | subject=%s", filename, email_data.subject)
        converted = ConvertedFile(
            name=markdown_filename(filename),
            content=render_markdown(email_data, filename),
            original_name=filename,
        )
        return email_data, converted

    @staticmethod
    def _failed(
        file_path: str, errors: list[ConversionIssue], start: float
    ) -> ProcessingResult:
        return ProcessingResult(
            file_path=file_path,
            errors=[e.code.value for e in errors],
            error_details=errors,
            processing_time_seconds=time.monotonic() - start,
        )

    @staticmethod
    def _collect_warnings(email_data: EmailData, filename: str) -> list[ConversionIssue]:
        checks = [
            (
                not email_data.headers.get("subject"),
                ErrorCode.W_EML_NO_SUBJECT,
                "Email has no Subject header",
            ),
            (
                not email_data.headers.get("date"),
                ErrorCode.W_EML_NO_DATE,
                "Email has no Date header",
            ),
            (
                email_data.body_source == BodySource.EMPTY,
                ErrorCode.W_EML_NO_BODY,
                "Email has no text/html or text/plain body",
            ),
            (
                email_data.body_source == BodySource.HTML_CONVERTED,
                ErrorCode.W_EML_HTML_CONVERTED,
                "Email body was converted from HTML",
            ),
            (
                email_data.nested_multipart,
                ErrorCode.W_EML_NESTED_MULTIPART,
                "Nested multipart parts were not expanded",
            ),
        ]
        return [
            ConversionIssue(
                code=code,
                message=message,
                stage="convert",
                recoverable=True,
                filename=filename,
            )
            for triggered, code, message in checks
            if triggered
        ]

    @staticmethod
    def _build_metadata(email_data: EmailData) -> EmailMetadata:
        headers = email_data.headers
        return EmailMetadata(
            subject=headers.get("subject"),
            from_address=headers.get("from"),
            to_address=headers.get("to"),
            date=headers.get("date"),
            body_source=email_data.body_source,
            header_count=len(headers),
        )


def _read_path(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise ParseError(
            path.name, f"Cannot read file: {exc}", ErrorCode.E_EML_FILE_CORRUPT
        ) from exc
