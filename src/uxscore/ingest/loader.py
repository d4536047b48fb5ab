# src/uxscore/ingest/loader.py
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from uxscore.app.errors import ImporterError

from .payload import parse_payload


logger = logging.getLogger(__name__)

# Item identifiers as used in answer records: Q1, QHS3, ATT7, ...
_ITEM_COLUMN = re.compile(r"^[A-Z]+\d+$")

_TRUTHY = {"1", "true", "yes", "y", "on", "x"}


@dataclass(frozen=True)
class LoadResult:
    answers: List[Dict[str, float]]
    # questionnaire ids declared inside the payloads, when present
    declared_questionnaires: List[str] = field(default_factory=list)
    skipped_rows: int = 0
    archived_rows: int = 0


class ResponseLoader:
    """
    Reads exported project responses into answer records.

    Two layouts are accepted:
      - payload layout: one column holding the JSON payload of each response;
      - wide layout: one column per item id (Q1, Q2, ... or QP1, ATT2, ...).

    Archived responses are dropped. Rows that yield no answers are counted
    as skipped.
    """

    def __init__(self, payload_column: str = "Payload", archived_column: str = "archived"):
        self.payload_column = payload_column
        self.archived_column = archived_column

    def load_csv(self, file_path: str, encoding: Optional[str] = None) -> LoadResult:
        try:
            df = pd.read_csv(file_path, encoding=encoding)
        except Exception as e:
            raise ImporterError(f"Failed to read CSV: {e}") from e
        return self.load_dataframe(df, source_hint=str(file_path))

    def load_excel(self, file_path: str, sheet_name: Optional[str] = None) -> LoadResult:
        try:
            df = pd.read_excel(file_path, sheet_name=sheet_name or 0)
        except Exception as e:
            raise ImporterError(f"Failed to read Excel: {e}") from e
        return self.load_dataframe(df, source_hint=f"{file_path}#{sheet_name or 'default'}")

    def load(self, file_path: str, encoding: Optional[str] = None) -> LoadResult:
        # Dispatch on extension.
        lower = str(file_path).lower()
        if lower.endswith((".xlsx", ".xls")):
            return self.load_excel(file_path)
        return self.load_csv(file_path, encoding=encoding)

    def load_dataframe(self, df: pd.DataFrame, source_hint: str = "<dataframe>") -> LoadResult:
        if df is None or df.empty:
            raise ImporterError("Input dataset is empty.")

        df = df.copy()
        df.columns = [str(c).strip() for c in df.columns]

        archived_col = self._find_column(df, self.archived_column)
        archived_rows = 0
        if archived_col is not None:
            archived_mask = df[archived_col].map(self._is_truthy).astype(bool)
            archived_rows = int(archived_mask.sum())
            df = df[~archived_mask]

        payload_col = self._find_column(df, self.payload_column)
        if payload_col is not None:
            result = self._from_payloads(df[payload_col], archived_rows)
        else:
            item_columns = [c for c in df.columns if _ITEM_COLUMN.match(c.upper())]
            if not item_columns:
                raise ImporterError(
                    f"No '{self.payload_column}' column and no item columns found in {source_hint}."
                )
            result = self._from_wide(df, item_columns, archived_rows)

        logger.info(
            "Loaded %d response(s) from %s",
            len(result.answers),
            source_hint,
            extra={"skipped_rows": result.skipped_rows, "archived_rows": result.archived_rows},
        )
        return result

    def _from_payloads(self, payloads: pd.Series, archived_rows: int) -> LoadResult:
        answers: List[Dict[str, float]] = []
        declared: List[str] = []
        skipped = 0
        for text in payloads:
            payload = parse_payload(None if self._is_missing(text) else str(text))
            record = payload.get("answers") if payload else None
            if not isinstance(record, dict):
                skipped += 1
                continue
            qid = payload.get("questionnaireId")
            if isinstance(qid, str) and qid and qid not in declared:
                declared.append(qid)
            answers.append({str(k): v for k, v in record.items() if v is not None})
        if skipped:
            logger.warning("Skipped %d response(s) with an unreadable payload", skipped)
        return LoadResult(
            answers=answers,
            declared_questionnaires=declared,
            skipped_rows=skipped,
            archived_rows=archived_rows,
        )

    def _from_wide(self, df: pd.DataFrame, item_columns: List[str], archived_rows: int) -> LoadResult:
        numeric = df[item_columns].apply(pd.to_numeric, errors="coerce")
        numeric.columns = [c.upper() for c in item_columns]
        answers: List[Dict[str, float]] = []
        skipped = 0
        for row in numeric.to_dict(orient="records"):
            # numpy scalars become plain floats; NaN cells are unanswered items.
            record = {k: float(v) for k, v in row.items() if not self._is_missing(v)}
            if not record:
                skipped += 1
                continue
            answers.append(record)
        return LoadResult(answers=answers, skipped_rows=skipped, archived_rows=archived_rows)

    @staticmethod
    def _find_column(df: pd.DataFrame, name: str) -> Optional[str]:
        # Case-insensitive column lookup.
        wanted = name.strip().lower()
        for col in df.columns:
            if col.lower() == wanted:
                return col
        return None

    @staticmethod
    def _is_missing(value: Any) -> bool:
        if value is None:
            return True
        try:
            return bool(np.isnan(value))
        except TypeError:
            return False

    @staticmethod
    def _is_truthy(value: Any) -> bool:
        if ResponseLoader._is_missing(value):
            return False
        if isinstance(value, (bool, np.bool_, int, float, np.number)):
            return bool(value)
        return str(value).strip().lower() in _TRUTHY
