from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

from uxscore.app.config import Settings
from uxscore.app.errors import AppError
from uxscore.app.logging import questionnaire_context, setup_logging
from uxscore.ingest.loader import ResponseLoader
from uxscore.scoring.report import (
    compute_questionnaire_stats,
    resolve_questionnaire_id,
    results_frame,
    supported_questionnaires,
)


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="uxscore",
        description="Score exported UX questionnaire responses (SUS, UMUX, UEQ, DEEP, AttrakDiff...).",
    )
    parser.add_argument("file", help="CSV or Excel export of project responses")
    parser.add_argument(
        "-q", "--questionnaire",
        help=f"Questionnaire type, e.g. 'SUS' or 'AttrakDiff abrégé'. One of: {', '.join(supported_questionnaires())}. "
             "Defaults to the id declared in the payloads.",
    )
    parser.add_argument("--table", action="store_true", help="Print a per-dimension table instead of JSON")
    parser.add_argument("--sheet", help="Excel sheet name")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    settings = Settings.from_env()
    setup_logging(settings.log_level, settings.log_json)

    args = build_parser().parse_args(argv)
    loader = ResponseLoader(payload_column=settings.payload_column, archived_column=settings.archived_column)

    try:
        if args.sheet:
            loaded = loader.load_excel(args.file, sheet_name=args.sheet)
        else:
            loaded = loader.load(args.file, encoding=settings.csv_encoding)

        label = args.questionnaire or (loaded.declared_questionnaires[0] if loaded.declared_questionnaires else None)
        qid = resolve_questionnaire_id(label)
        if qid is None:
            logger.error("Cannot tell which questionnaire to score", extra={"label": label})
            return 2

        with questionnaire_context(qid):
            report = compute_questionnaire_stats(qid, loaded.answers)
            if not report.has_data:
                logger.warning("No valid respondent", extra={"responses": len(loaded.answers)})
    except AppError as e:
        logger.error(str(e))
        return 1

    if args.table:
        print(results_frame(report.result).to_string(index=False))
        if report.result is not None and report.result.grade is not None:
            print(f"grade: {report.result.grade}")
    else:
        print(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
