"""
Cashback Package - Tiered cashback calculator and spreadsheet batch processor

Modules:
- rules: Tier tables, limits and platform profiles
- calculator: Rule engine (truncation, floor/cap clamps, formatting)
- extract: CSV/XLSX reading into header -> value rows
- transform: Column resolution, date and number normalization, loss derivation
- categorize: Ordered game classification rules
- pipeline: Aggregation and orchestration
- load: Report export (xlsx/csv/txt)
- schema: TypedDict definitions
"""
from .calculator import calculate_cashback, format_currency, format_percent, truncate_to_cents
from .extract import FileParseError
from .pipeline import CashbackPipeline, process_batch
from .rules import Category, Platform, UnsupportedRuleSetError, get_rule_set
from .schema import CashbackResult, ProcessedEntry, BatchReport

__all__ = [
    'calculate_cashback', 'format_currency', 'format_percent', 'truncate_to_cents',
    'process_batch', 'CashbackPipeline', 'FileParseError',
    'Category', 'Platform', 'UnsupportedRuleSetError', 'get_rule_set',
    'CashbackResult', 'ProcessedEntry', 'BatchReport',
]
