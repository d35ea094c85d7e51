"""
Export of missing translations.

For each domain the job fetches keys lacking a value in the target locale,
machine-translates their reference text when an engine is available, and
writes the result to a CSV file or merges it into a YAML dictionary.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from translate_keys.config import ExportFormat
from translate_keys.database import Domain, TranslationRow
from translate_keys.engine.base import DisabledEngine, TranslationEngine, Usage
from translate_keys.engine.placeholders import language_code
from translate_keys.errors import EngineError, ValidationError
from translate_keys.export.dictionary import backup_file, timestamp
from translate_keys.export.writers import ExportRecord, write_records
from translate_keys.repository import TranslationRepository

logger = logging.getLogger(__name__)


class ExportStage(str, Enum):
    """Stages a domain goes through during export."""

    FETCHING = "fetching"
    TRANSLATING = "translating"
    ENGINE_DISABLED = "engine_disabled"
    SIMULATING = "simulating"
    WRITING = "writing"
    DONE = "done"


@dataclass
class ProgressInfo:
    """Progress information for callbacks."""

    domain: str
    stage: ExportStage
    current: int = 0
    total: int = 0
    key: str | None = None


ProgressCallback = Callable[[ProgressInfo], None] | None


@dataclass
class RowError:
    """A row left untranslated because the engine call failed."""

    key: str
    message: str


@dataclass
class DomainResult:
    """Outcome of exporting one domain."""

    domain: str
    rows_found: int = 0
    records: list[ExportRecord] = field(default_factory=list)
    skipped: list[RowError] = field(default_factory=list)
    output_path: Path | None = None
    backup_path: Path | None = None
    written: bool = False
    simulated_chars: int = 0


@dataclass
class ExportSummary:
    """Outcome of a whole export run."""

    locale: str
    fmt: ExportFormat
    simulate: bool
    engine_name: str | None
    engine_note: str | None = None
    domains: list[DomainResult] = field(default_factory=list)
    usage: Usage | None = None
    usage_error: str | None = None

    @property
    def simulated_chars(self) -> int:
        return sum(d.simulated_chars for d in self.domains)

    @property
    def records_written(self) -> int:
        return sum(len(d.records) for d in self.domains if d.written)

    @property
    def rows_skipped(self) -> int:
        return sum(len(d.skipped) for d in self.domains)


def parse_domains(value: str | list[str]) -> list[str]:
    """Split a comma separated domain list, dropping blanks and duplicates."""
    items = value.split(",") if isinstance(value, str) else value
    domains: list[str] = []
    for item in items:
        item = item.strip()
        if item and item not in domains:
            domains.append(item)
    return domains


class ExportJob:
    """
    Exports missing translations of one locale.

    The engine is either a :class:`TranslationEngine` or a
    :class:`DisabledEngine`; with the latter, records are exported with an
    empty translation.
    """

    def __init__(
        self,
        repository: TranslationRepository,
        engine: TranslationEngine | DisabledEngine,
        translations_dir: Path | str,
        *,
        source_language: str = "en",
        reference_locale: str | None = None,
        timestamp_format: str = "%d%m%Y-%H%M%S",
        progress_callback: ProgressCallback = None,
    ):
        """
        Initialize export job.

        Args:
            repository: Translation store access.
            engine: Translation engine, or the disabled variant.
            translations_dir: Directory export files are written to.
            source_language: Language code the engine translates from.
            reference_locale: Locale holding the source text; the store's
                default locale when None.
            timestamp_format: strftime format of the file name suffix.
            progress_callback: Called for every stage change and row.
        """
        self.repository = repository
        self.engine = engine
        self.translations_dir = Path(translations_dir)
        self.source_language = source_language
        self.reference_locale = reference_locale
        self.timestamp_format = timestamp_format
        self._progress_callback = progress_callback

    @property
    def engine_enabled(self) -> bool:
        return isinstance(self.engine, TranslationEngine)

    def _report(self, info: ProgressInfo) -> None:
        if self._progress_callback:
            self._progress_callback(info)

    def validate(self, locale: str, fmt: ExportFormat | str, domains: list[str]) -> ExportFormat:
        """
        Check the requested format, domains and locale.

        Returns:
            The parsed export format.

        Raises:
            ValidationError: On the first invalid input.
        """
        if isinstance(fmt, ExportFormat):
            export_format = fmt
        else:
            try:
                export_format = ExportFormat(fmt.lower())
            except ValueError:
                raise ValidationError(f"Format {fmt} is not supported") from None

        if not domains:
            raise ValidationError("No domain to export")
        unsupported = [d for d in domains if d not in Domain.values()]
        if unsupported:
            raise ValidationError(
                f"Domain {', '.join(unsupported)} not supported. "
                f"Supported domains are: {', '.join(Domain.values())}"
            )

        available = self.repository.available_locales()
        if locale not in available:
            raise ValidationError(
                f"Locale {locale} not supported. Available locales: {', '.join(available)}"
            )

        return export_format

    def output_path(
        self, domain: str, locale: str, fmt: ExportFormat, overwrite: bool, suffix: str
    ) -> Path:
        """
        Build the export file path.

        ``<dir>/<domain>.<locale>.<format>`` when overwriting, otherwise
        ``<dir>/<domain>.<locale>-<suffix>.<format>`` so runs never clobber
        each other.
        """
        stamp = "" if overwrite else f"-{suffix}"
        return self.translations_dir / f"{domain}.{locale}{stamp}.{fmt.value}"

    def run(
        self,
        locale: str,
        *,
        fmt: ExportFormat | str = ExportFormat.CSV,
        domains: list[str] | str = ("messages", "workflows"),
        overwrite: bool = False,
        limit: int | None = None,
        simulate: bool = False,
    ) -> ExportSummary:
        """
        Export missing translations of ``locale`` for every requested domain.

        Raises:
            ValidationError: If the format, a domain or the locale is invalid.
        """
        domain_list = parse_domains(domains if isinstance(domains, str) else list(domains))
        export_format = self.validate(locale, fmt, domain_list)
        reference_locale = self.reference_locale or self.repository.default_locale()
        suffix = timestamp(self.timestamp_format)

        summary = ExportSummary(
            locale=locale,
            fmt=export_format,
            simulate=simulate,
            engine_name=self.engine.name if isinstance(self.engine, TranslationEngine) else None,
            engine_note=self.engine.reason if isinstance(self.engine, DisabledEngine) else None,
        )

        for domain in domain_list:
            result = self.export_domain(
                domain,
                locale,
                reference_locale,
                fmt=export_format,
                overwrite=overwrite,
                limit=limit,
                simulate=simulate,
                suffix=suffix,
            )
            summary.domains.append(result)

        if self.engine_enabled and not simulate:
            try:
                summary.usage = self.engine.usage()
            except EngineError as e:
                logger.info("Could not read engine usage: %s", e)
                summary.usage_error = str(e)

        if simulate:
            logger.info(
                "Simulation for %s: %d characters could be translated",
                locale,
                summary.simulated_chars,
            )
        return summary

    def export_domain(
        self,
        domain: str,
        locale: str,
        reference_locale: str,
        *,
        fmt: ExportFormat,
        overwrite: bool = False,
        limit: int | None = None,
        simulate: bool = False,
        suffix: str = "",
    ) -> DomainResult:
        """Fetch, translate and write the missing translations of one domain."""
        result = DomainResult(domain=domain)

        self._report(ProgressInfo(domain=domain, stage=ExportStage.FETCHING))
        rows = self.repository.fetch_missing_translations(
            domain, locale, reference_locale, limit=limit
        )
        result.rows_found = len(rows)
        logger.info("Domain %s: %d missing translations for %s", domain, len(rows), locale)

        if simulate:
            stage = ExportStage.SIMULATING
        elif self.engine_enabled:
            stage = ExportStage.TRANSLATING
        else:
            stage = ExportStage.ENGINE_DISABLED

        target_lang = language_code(locale)
        for index, row in enumerate(rows, start=1):
            self._report(
                ProgressInfo(
                    domain=domain, stage=stage, current=index, total=len(rows), key=row.key
                )
            )

            if not row.english_value or not row.english_value.strip():
                continue

            if simulate:
                result.simulated_chars += len(row.english_value)
                continue

            translated = self._translate_row(row, target_lang, result)
            if translated is None:
                continue

            result.records.append(
                ExportRecord(
                    key=row.key,
                    english_value=row.english_value,
                    translated_value=translated,
                )
            )

        if simulate:
            self._report(ProgressInfo(domain=domain, stage=ExportStage.DONE))
            return result

        result.output_path = self.output_path(domain, locale, fmt, overwrite, suffix)
        if result.records:
            self._report(ProgressInfo(domain=domain, stage=ExportStage.WRITING))
            self.translations_dir.mkdir(parents=True, exist_ok=True)
            target = result.output_path
            if overwrite and target.exists():
                result.backup_path = backup_file(target, target.with_name(f"{target.name}.backup"))
            write_records(fmt, locale, result.output_path, result.records)
            result.written = True
            self.repository.log(
                "INFO",
                "export",
                f"Wrote {len(result.records)} records to {result.output_path}",
                domain=domain,
                context={
                    "locale": locale,
                    "format": fmt.value,
                    "skipped": len(result.skipped),
                    "translated": self.engine_enabled,
                },
            )

        self._report(ProgressInfo(domain=domain, stage=ExportStage.DONE))
        return result

    def _translate_row(
        self, row: TranslationRow, target_lang: str, result: DomainResult
    ) -> str | None:
        """Translate one row; None means the row was skipped."""
        if not isinstance(self.engine, TranslationEngine):
            return ""

        try:
            return self.engine.translate(row.english_value, self.source_language, target_lang)
        except EngineError as e:
            logger.info("Skipping %s: %s", row.key, e)
            result.skipped.append(RowError(key=row.key, message=str(e)))
            self.repository.log(
                "ERROR",
                "translate",
                str(e),
                domain=result.domain,
                context={"key": row.key, "locale": row.locale_code},
            )
            return None
