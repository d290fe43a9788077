"""
Transform Layer - Deterministic normalization of raw spreadsheet rows.

This module implements:
1. Column resolution by header alias (exact, then substring)
2. Date normalization to DD/MM/YYYY
3. Lenient numeric parsing (R$, comma decimals)
4. Loss derivation from wagered/won or a single GGR column
"""
import logging
import math
import numbers
import re
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional

from .schema import RowFields


# ─────────────────────────────────────────────────────────────
# Column Aliases
# ─────────────────────────────────────────────────────────────
# Order matters inside each list: earlier aliases win.

COLUMN_ALIASES: Dict[str, List[str]] = {
    "date": ["Data", "Date", "Dia"],
    "game": ["Tipo de Jogo", "Game", "Jogo", "Nome"],
    "wagered": ["Valor Apostado", "Bet", "Aposta"],
    "won": ["Valor Ganho", "Win", "Ganho"],
    "ggr": ["GGR", "PL", "P/L", "Win/Loss"],
}

# Day zero of spreadsheet serial dates (accounts for the 1900 leap-year bug)
SERIAL_EPOCH = date(1899, 12, 30)
DATE_FORMAT = "%d/%m/%Y"


def is_blank(val: Any) -> bool:
    if val is None:
        return True
    if isinstance(val, float) and math.isnan(val):
        return True
    return isinstance(val, str) and val.strip() == ""


def _is_missing(val: Any) -> bool:
    # A literal 0 in a date/game cell counts as empty
    if isinstance(val, numbers.Real) and not isinstance(val, bool) and val == 0:
        return True
    return is_blank(val)


def parse_bucket_date(date_str: str) -> Optional[date]:
    """Parse a DD/MM/YYYY string, None when it is not one."""
    try:
        return datetime.strptime(str(date_str).strip(), DATE_FORMAT).date()
    except ValueError:
        return None


class RowTransformer:
    """
    Deterministic transformer for rows of unknown shape.
    No AI, no ML - header aliases and regex only, for reproducible results.
    """

    def __init__(self, aliases: Optional[Dict[str, List[str]]] = None):
        self.aliases = aliases if aliases else COLUMN_ALIASES
        self.iso_date_pattern = re.compile(r'^(\d{4})-(\d{2})-(\d{2})$')
        self.time_suffix_pattern = re.compile(r'[ T]\d{1,2}:\d{2}(:\d{2}(\.\d+)?)?$')
        self.number_pattern = re.compile(r'^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?')

    def transform(self, row: Dict[str, Any]) -> Optional[RowFields]:
        """
        Extract the semantic fields of one row.

        Returns:
            RowFields, or None when the row has no usable date or game name
        """
        raw_date = self.find_value(row, self.aliases["date"])
        if _is_missing(raw_date):
            return None

        game = self.find_value(row, self.aliases["game"])
        if _is_missing(game):
            return None

        return {
            "date": self.normalize_date(raw_date),
            "game": str(game).strip(),
            "loss": self.derive_loss(row),
        }

    # ─────────────────────────────────────────────────────────────
    # Column Resolution
    # ─────────────────────────────────────────────────────────────

    def resolve_column(self, row: Dict[str, Any], keys: List[str]) -> Optional[str]:
        """Find the header for a field: exact match first, then containment."""
        headers = [h for h, v in row.items() if not is_blank(v)]
        normalized = [(h, str(h).lower().strip()) for h in headers]
        targets = [k.lower().strip() for k in keys]

        for target in targets:
            for header, norm in normalized:
                if norm == target:
                    return header

        # e.g. "Valor Apostado (R$)" contains "apostado"
        for target in targets:
            for header, norm in normalized:
                if target in norm:
                    return header
        return None

    def find_value(self, row: Dict[str, Any], keys: List[str]) -> Any:
        header = self.resolve_column(row, keys)
        return row[header] if header is not None else None

    # ─────────────────────────────────────────────────────────────
    # Value Normalization
    # ─────────────────────────────────────────────────────────────

    def normalize_date(self, raw: Any) -> str:
        """Normalize a date cell to DD/MM/YYYY; unknown text passes through."""
        if isinstance(raw, datetime):
            return raw.strftime(DATE_FORMAT)
        if isinstance(raw, date):
            return raw.strftime(DATE_FORMAT)
        if isinstance(raw, numbers.Real) and not isinstance(raw, bool):
            # Fractional part is the time of day
            return (SERIAL_EPOCH + timedelta(days=math.floor(raw))).strftime(DATE_FORMAT)

        # "15/01/2024 10:30", "2024-01-15T10:30:00"
        text = self.time_suffix_pattern.sub('', str(raw).strip())
        match = self.iso_date_pattern.match(text)
        if match:
            y, m, d = match.groups()
            return f"{d}/{m}/{y}"
        return text

    def parse_number(self, val: Any) -> float:
        if isinstance(val, bool):
            return 0.0
        if isinstance(val, numbers.Real):
            return 0.0 if math.isnan(val) else float(val)
        if isinstance(val, str):
            clean = val.strip()
            if clean == '':
                return 0.0
            clean = re.sub(r'[R$\s]', '', clean)
            if ',' in clean and '.' not in clean:
                clean = clean.replace(',', '.', 1)
            # Leading literal only: "1,234.50" reads as 1
            match = self.number_pattern.match(clean)
            if not match:
                return 0.0
            return float(match.group(0))
        return 0.0

    def derive_loss(self, row: Dict[str, Any]) -> float:
        """
        Loss for one row.

        wagered - won when both columns exist, else the GGR/net column. A
        negative GGR is read as player loss only when there is no wagered column.
        """
        bet_val = self.find_value(row, self.aliases["wagered"])
        win_val = self.find_value(row, self.aliases["won"])
        ggr_val = self.find_value(row, self.aliases["ggr"])

        if bet_val is not None and win_val is not None:
            bet = self.parse_number(bet_val)
            won = self.parse_number(win_val)
            if not (math.isfinite(bet) and math.isfinite(won)):
                return bet - won
            # 0.3 - 0.1 must be 0.2, not 0.19999999999999998
            return float(Decimal(str(bet)) - Decimal(str(won)))

        if ggr_val is not None:
            loss = self.parse_number(ggr_val)
            if loss < 0 and bet_val is None:
                # TODO: confirm GGR sign convention per export with product before changing
                logging.debug(f"Inverting negative GGR {loss} as player loss")
                loss = abs(loss)
            return loss

        return 0.0
