"""
Cashback Pipeline Orchestrator - Coordinates Extract, Transform, Categorize,
Aggregate, Calculate and Load.

Flow: Extract → Transform → Categorize → Aggregate → Calculate → Sort → Load

Rows that cannot be read are skipped; only an unreadable file fails the batch.
"""
import logging
import time
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from .calculator import calculate_cashback
from .categorize import CategoryMapper
from .config import Config
from .extract import FileParseError, ParserFactory
from .load import ReportExporter
from .rules import Category, Platform, to_platform
from .schema import BatchReport, ProcessedEntry
from .transform import DATE_FORMAT, RowTransformer, parse_bucket_date

# Paid per Monday-starting week; everything else per day
WEEKLY_BUCKETED = {Category.WEEKLY, Category.SPORTS}


def week_start(day: date) -> date:
    """Monday of the week containing day (Sunday rolls back 6 days)."""
    return day - timedelta(days=day.weekday())


def bucket_date(day: date, category: Category) -> date:
    return week_start(day) if category in WEEKLY_BUCKETED else day


class BatchProcessor:
    """
    Single-pass aggregation of raw rows into a cashback report.
    Holds no state between calls; process() is deterministic.
    """

    def __init__(self, transformer: Optional[RowTransformer] = None,
                 category_mapper: Optional[CategoryMapper] = None):
        self.transformer = transformer or RowTransformer()
        self.category_mapper = category_mapper or CategoryMapper()
        self.last_stats: Dict[str, Any] = {}

    def process(self, rows: Iterable[Dict[str, Any]], platform: Union[str, Platform]) -> BatchReport:
        platform = to_platform(platform)
        aggregations, stats = self.aggregate(rows, platform)

        entries: List[Tuple[date, ProcessedEntry]] = []
        for (day, category), total_loss in aggregations.items():
            # Cashback only on positive loss
            if total_loss <= 0:
                continue
            loss = float(total_loss)
            calc = calculate_cashback(loss, category, platform)
            if calc["cashbackAmount"] <= 0:
                continue
            entries.append((day, {
                "date": day.strftime(DATE_FORMAT),
                "mode": category.value,
                "loss": loss,
                "cashback": calc["cashbackAmount"],
                "percent": calc["appliedPercent"],
            }))

        # Stable: same-date entries keep first-seen order
        entries.sort(key=lambda item: item[0])
        summary = [entry for _, entry in entries]

        cents_by_mode = {c.value: Decimal(0) for c in Category}
        for entry in summary:
            cents_by_mode[entry["mode"]] += Decimal(str(entry["cashback"]))

        stats["entries"] = len(summary)
        self.last_stats = stats
        logging.info(
            f"Batch {platform.value}: {stats['total_rows']} rows, "
            f"{stats['skipped_rows']} skipped, {len(summary)} entries"
        )

        return {
            "summary": summary,
            "totalCashback": float(sum(cents_by_mode.values())),
            "detailsByMode": {mode: float(v) for mode, v in cents_by_mode.items()},
        }

    def aggregate(self, rows: Iterable[Dict[str, Any]], platform: Platform):
        """
        Sum row losses per (bucket date, category).

        Returns:
            Tuple of (aggregations, stats)
        """
        aggregations: Dict[Tuple[date, Category], Decimal] = {}
        stats = {"total_rows": 0, "skipped_rows": 0, "excluded_rows": 0}

        for row in rows:
            stats["total_rows"] += 1
            fields = self.transformer.transform(row) if isinstance(row, dict) else None
            if fields is None:
                stats["skipped_rows"] += 1
                continue

            day = parse_bucket_date(fields["date"])
            if day is None:
                logging.debug(f"Skipping row with unreadable date: {fields['date']!r}")
                stats["skipped_rows"] += 1
                continue

            category = self.category_mapper.categorize(fields["game"], platform)
            if category is None:
                stats["excluded_rows"] += 1
                continue

            key = (bucket_date(day, category), category)
            # Summed in Decimal so cent-valued rows never drift into a tier gap
            aggregations[key] = aggregations.get(key, Decimal(0)) + Decimal(str(fields["loss"]))

        return aggregations, stats


def process_batch(rows: Iterable[Dict[str, Any]], platform: Union[str, Platform]) -> BatchReport:
    """Build the cashback report for already-materialized spreadsheet rows."""
    return BatchProcessor().process(rows, platform)


class CashbackPipeline:
    """
    File-level pipeline: read a spreadsheet export, build the report, export it.
    """

    def __init__(self):
        self.processor = BatchProcessor()
        self.exporter = ReportExporter()

    def process_file(self, file_path: str, file_type: str, platform: Union[str, Platform]) -> BatchReport:
        """
        Raises:
            FileParseError: the file could not be decoded
        """
        parser = ParserFactory.get_parser(file_type)
        raw_data = parser.parse(file_path)
        return self.processor.process(raw_data["rows"], platform)

    def process(self, file_path: str, file_type: str, platform: Union[str, Platform],
                target_format: str = Config.DEFAULT_EXPORT):
        """
        Process a file through the complete pipeline.
        Yields (percentage, message, result_dict)
        """
        start_time = time.time()

        try:
            # ─── 1. Extract (0-30%) ───
            yield 10, "Lendo arquivo...", None
            parser = ParserFactory.get_parser(file_type)
            raw_data = parser.parse(file_path)
            yield 30, f"{len(raw_data['rows'])} linhas lidas.", None

            # ─── 2. Transform, Categorize, Aggregate, Calculate (30-75%) ───
            yield 40, "Calculando cashback...", None
            report = self.processor.process(raw_data["rows"], platform)
            yield 75, f"{len(report['summary'])} períodos com cashback.", None

            # ─── 3. Load (75-100%) ───
            yield 85, "Gerando relatório...", None
            output_buffer = self.exporter.generate(report, platform, target_format)

            stats = dict(self.processor.last_stats)
            stats.update({
                "document_hash": raw_data["document_hash"],
                "source_file": raw_data["source_file"],
                "processing_time_ms": (time.time() - start_time) * 1000,
            })

            yield 100, "Concluído", {
                "success": True,
                "report": report,
                "output_buffer": output_buffer,
                "stats": stats,
            }

        except (FileParseError, ValueError) as e:
            # Unreadable file, unsupported file type/format or platform
            yield 0, f"Erro: {e}", {
                "success": False,
                "error": str(e),
                "stats": {}
            }
        except Exception:
            logging.exception("PIPELINE_ERROR")
            yield 0, f"Erro: {Config.PARSE_ERROR_MESSAGE}", {
                "success": False,
                "error": Config.PARSE_ERROR_MESSAGE,
                "stats": {}
            }
