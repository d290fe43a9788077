"""
Cashback Schema - TypedDict definitions shared by the calculator and the pipeline.

Key names follow the report contract consumed by the front-end
(camelCase for report-level fields, short names for entries).
"""
from typing import TypedDict, Dict, Any, List, Optional


class CashbackResult(TypedDict):
    """Output of one rule-engine calculation"""
    lossAmount: float             # Loss the calculation was asked about
    cashbackAmount: float         # Truncated, clamped rebate (0 when not granted)
    appliedPercent: float         # Tier fraction, 0 when no cashback
    message: str                  # Informational status text


class RowFields(TypedDict):
    """Semantic fields resolved from one raw spreadsheet row"""
    date: str                     # Normalized DD/MM/YYYY (or passed-through text)
    game: str                     # Game / category name as exported
    loss: float                   # Derived loss for the row


class ProcessedEntry(TypedDict):
    """One aggregate that produced cashback"""
    date: str                     # Bucket key, DD/MM/YYYY
    mode: str                     # 'weekly' | 'daily' | 'sports' | 'aviator'
    loss: float                   # Summed loss of the bucket
    cashback: float
    percent: float


class BatchReport(TypedDict):
    """Final output of the ingestion pipeline"""
    summary: List[ProcessedEntry]
    totalCashback: float
    detailsByMode: Dict[str, float]


class ExtractionPayload(TypedDict):
    """Output from Extract layer"""
    document_hash: str            # SHA256 of the source file
    rows: List[Dict[str, Any]]    # Header -> cell value, blanks as None
    source_file: str
    sheet_name: Optional[str]
