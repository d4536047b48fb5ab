from __future__ import annotations


class AppError(Exception):
    # Base class for domain errors (intended, meaningful failures).
    pass


class ImporterError(AppError):
    # Raised for importer-related failures (unreadable file, missing payload column, etc.).
    pass


class UnknownQuestionnaire(AppError):
    # Raised when scoring is requested for a questionnaire id with no item table.
    pass
