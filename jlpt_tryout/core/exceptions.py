from typing import Any, Dict, List, Optional

from fastapi import status


class TryoutError(Exception):
    """Base class for every error the tryout engine raises on purpose.

    Carries the HTTP status and machine-readable code the API layer renders,
    so services never build HTTP responses themselves.
    """
    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "TRYOUT_ERROR"
    default_message: str = "The request could not be processed."

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


# Configuration errors

class InsufficientQuestions(TryoutError):
    status_code = status.HTTP_409_CONFLICT
    code = "INSUFFICIENT_QUESTIONS"

    def __init__(self, level: str, section_type: str, subsection_number: int, required: int, available: int):
        super().__init__(
            f"Question pool for {level} {section_type} mondai {subsection_number} "
            f"has {available} usable questions, {required} required.",
            details={
                "level": level,
                "section_type": section_type,
                "subsection_number": subsection_number,
                "required": required,
                "available": available,
            },
        )


class InvalidSectionConfig(TryoutError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "INVALID_SECTION_CONFIG"


# State-violation errors

class AttemptClosed(TryoutError):
    status_code = status.HTTP_409_CONFLICT
    code = "ATTEMPT_CLOSED"
    default_message = "This test attempt is already completed."


class SectionLocked(TryoutError):
    status_code = status.HTTP_409_CONFLICT
    code = "SECTION_LOCKED"
    default_message = "This section has already been submitted and can no longer be changed."


class AlreadySubmitted(TryoutError):
    status_code = status.HTTP_409_CONFLICT
    code = "ALREADY_SUBMITTED"
    default_message = "This section has already been submitted."


class ResultsNotAvailable(TryoutError):
    status_code = status.HTTP_409_CONFLICT
    code = "RESULTS_NOT_AVAILABLE"
    default_message = "Results are available once every section has been submitted."


# Access errors. Missing and not-owned render identically.

class AccessError(TryoutError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class AttemptNotFound(AccessError):
    default_message = "Test attempt not found."


class AttemptForbidden(AttemptNotFound):
    pass


class OfflineResultNotFound(AccessError):
    default_message = "Offline result not found."


class OfflineResultForbidden(OfflineResultNotFound):
    pass


# Validation errors

class ValidationFailed(TryoutError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "VALIDATION_ERROR"


class QuestionNotInAttempt(ValidationFailed):
    default_message = "Question does not belong to this test attempt."


class SectionNotInAttempt(ValidationFailed):
    default_message = "Section is not part of this test attempt."


class InvalidModeSelection(ValidationFailed):
    default_message = "Invalid test mode selection."


class OfflineValidationError(ValidationFailed):
    def __init__(self, errors: List[Dict[str, Any]]):
        self.errors = errors
        super().__init__(
            f"{len(errors)} problem(s) found in the submitted scores.",
            details={"errors": errors},
        )


class TimerExpired(TryoutError):
    code = "TIMER_EXPIRED"
    default_message = "The section timer has expired and cannot be restarted."
