"""
Batch jobs for translate-keys.

- ExportJob: missing translations -> DeepL -> CSV/YAML files
- ImportJob: reviewed CSV -> per-locale YAML dictionaries
"""

from translate_keys.jobs.export_job import (
    DomainResult,
    ExportJob,
    ExportStage,
    ExportSummary,
    ProgressInfo,
)
from translate_keys.jobs.import_job import ImportJob, ImportResult, infer_domain

__all__ = [
    "ExportJob",
    "ExportStage",
    "ExportSummary",
    "DomainResult",
    "ProgressInfo",
    "ImportJob",
    "ImportResult",
    "infer_domain",
]
