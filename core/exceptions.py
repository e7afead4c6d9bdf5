"""
Domain error taxonomy for WardRoster.

Every failure raised by the scheduling core carries a stable machine-readable
``kind`` plus a human-readable ``message``. The request layer renders them
as ``{"error": kind, "message": message}`` with ``http_status``
(see core.middleware.SchedulingErrorMiddleware). Internal details such as
stack traces or SQL text never end up in the message.

Families:
  ValidationError  → malformed or missing input; retrying as-is never helps
  ConflictError    → business-rule violation; the caller must change the request
  StateError       → the entity is not in a state that permits the operation
  NotFoundError    → referenced entity absent
  TransientError   → timeout / connection failure; safe to retry with backoff
"""


class SchedulingError(Exception):
    """Base class for all domain errors raised by the scheduling core."""

    kind = "scheduling_error"
    http_status = 400
    default_message = "The request could not be completed."

    def __init__(self, message: str = "", **context):
        self.message = message or self.default_message
        self.context = context
        super().__init__(self.message)

    def as_dict(self) -> dict:
        """Return the public JSON payload for this error."""
        return {"error": self.kind, "message": self.message}


class ValidationError(SchedulingError):
    kind = "validation_error"
    http_status = 400
    default_message = "The request is invalid."


class NotFoundError(SchedulingError):
    kind = "not_found"
    http_status = 404
    default_message = "The requested record does not exist."


class TransientError(SchedulingError):
    kind = "transient"
    http_status = 503
    default_message = "The database is busy. Please retry shortly."


# ---------------------------------------------------------------------------
# Conflicts
# ---------------------------------------------------------------------------


class ConflictError(SchedulingError):
    kind = "conflict"
    http_status = 409
    default_message = "The request conflicts with existing records."


class DuplicateAssignment(ConflictError):
    kind = "duplicate_assignment"
    default_message = "Nurse is already assigned to this shift."


class ShiftFull(ConflictError):
    kind = "shift_full"
    default_message = "Shift is already full."


class ScheduleConflict(ConflictError):
    kind = "schedule_conflict"
    default_message = "Nurse has a conflicting shift assignment."


class DuplicateActiveRequest(ConflictError):
    kind = "duplicate_active_request"
    default_message = "A leave request already exists for this assignment."


class ShiftConflict(ConflictError):
    kind = "shift_conflict"
    default_message = "A shift already exists for the same date and time."


# ---------------------------------------------------------------------------
# State errors
# ---------------------------------------------------------------------------


class StateError(SchedulingError):
    kind = "invalid_state"
    http_status = 400
    default_message = "The record is not in a state that permits this operation."


class AlreadyProcessed(StateError):
    kind = "already_processed"
    default_message = "Leave request has already been processed."


class NotOwner(StateError):
    kind = "not_owner"
    http_status = 403
    default_message = "You can only act on your own records."


class ShiftNotFuture(StateError):
    kind = "shift_not_future"
    default_message = "Cannot request leave for past or today shifts."


class InactiveNurse(StateError):
    kind = "inactive_nurse"
    default_message = "Shifts can only be assigned to active nurses."


class InvalidTransition(StateError):
    kind = "invalid_transition"
    default_message = "This status change is not allowed."


# Constraint identifiers produced by apps.scheduling.constraints, mapped to the
# exception raised when the constraint blocks an assignment.
CONSTRAINT_ERRORS = {
    InactiveNurse.kind: InactiveNurse,
    DuplicateAssignment.kind: DuplicateAssignment,
    ShiftFull.kind: ShiftFull,
    ScheduleConflict.kind: ScheduleConflict,
}
