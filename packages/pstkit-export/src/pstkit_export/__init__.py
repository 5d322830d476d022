"""pstkit-export -- Export PST/OST mail archives to standalone EML files.

Re-exports all public types: pipeline, config, models, errors, header
parsing and repair, the EML writer and the export strategies.
"""

from pstkit_export.config import ExportContext
from pstkit_export.errors import ErrorCode, ExportError, ExportException
from pstkit_export.headers import (
    HeaderParseError,
    MalformedHeaderKeyError,
    MalformedHeaderLineError,
    parse_headers,
)
from pstkit_export.models import ExportSummary, WalkStats
from pstkit_export.pipeline import ExportPipeline, run_export
from pstkit_export.repair import HeaderRepairEngine
from pstkit_export.strategies import (
    EMLExportStrategy,
    ExportStrategy,
    StrategyRegistry,
    create_default_registry,
    get_all_export_strategies,
    get_export_strategy_by_name,
)
from pstkit_export.walker import FolderWalker
from pstkit_export.writer import MailWriter, atomic_output, force_charset

__all__ = [
    # Pipeline
    "ExportPipeline",
    "run_export",
    "FolderWalker",
    # Config
    "ExportContext",
    # Errors
    "ErrorCode",
    "ExportError",
    "ExportException",
    # Models
    "ExportSummary",
    "WalkStats",
    # Headers
    "HeaderParseError",
    "MalformedHeaderKeyError",
    "MalformedHeaderLineError",
    "parse_headers",
    "HeaderRepairEngine",
    # Writer
    "MailWriter",
    "atomic_output",
    "force_charset",
    # Strategies
    "ExportStrategy",
    "EMLExportStrategy",
    "StrategyRegistry",
    "create_default_registry",
    "get_all_export_strategies",
    "get_export_strategy_by_name",
]
