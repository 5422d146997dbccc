from app.core.exceptions import (
    AppError,
    GenerationInProgressError,
    PreconditionFailure,
    ResourceNotFoundError,
    SchedulerError,
    SessionConflictError,
    SessionValidationError,
)


def test_scheduler_error_structure():
    err = SchedulerError(message="Test error", details={"foo": "bar"})
    assert err.status_code == 400
    assert err.message == "Test error"
    assert err.details == {"foo": "bar"}
    assert isinstance(err, AppError)


def test_app_error_defaults():
    err = AppError("Generic error")
    assert err.status_code == 500
    assert err.details == {}


def test_precondition_failure_is_a_scheduler_error():
    err = PreconditionFailure("No rooms available")
    assert isinstance(err, SchedulerError)
    assert err.status_code == 400


def test_session_errors_carry_their_items():
    invalid = SessionValidationError(["Room not found"])
    assert invalid.status_code == 400
    assert invalid.details == {"errors": ["Room not found"]}

    conflict = SessionConflictError([{"type": "room", "session_id": "s1"}])
    assert conflict.status_code == 409
    assert conflict.details["conflicts"][0]["type"] == "room"


def test_lease_and_not_found_status_codes():
    assert GenerationInProgressError("2024-W42", "all groups").status_code == 409
    missing = ResourceNotFoundError("Timetable", "g1/2024-W42")
    assert missing.status_code == 404
    assert missing.message == "Timetable with id g1/2024-W42 not found"
