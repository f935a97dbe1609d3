"""
Structured error codes for dimension files, boundaries and runs.
Exceptions carry these keys as error_key; map to user-facing messages in callers.
"""

# Dimension file
MISSING_TAG = "missing_tag"
DUPLICATE_TAG = "duplicate_tag"

# Boundary readiness
BOUNDARY_NOT_CLOSED = "boundary_not_closed"
COLLISION_SEGMENT = "collision_segment"
NO_ENTRANCE_EXIT = "no_entrance_exit"

# Drawing
ENTRY_TOO_NARROW = "entry_too_narrow"

RUN_FAILED = "run_failed"

# User-facing messages (short, actionable)
USER_MESSAGES: dict[str, str] = {
    MISSING_TAG: "A required dimension tag is missing. Add it with a non-negative number, then try again.",
    DUPLICATE_TAG: "A dimension tag appears more than once. Keep only one of each tag, then try again.",
    BOUNDARY_NOT_CLOSED: "The car park is not closed. Finish the border back at its starting point.",
    COLLISION_SEGMENT: "The border still has a colliding line. Remove it before generating parks.",
    NO_ENTRANCE_EXIT: "The car park needs at least one entrance and one exit.",
    ENTRY_TOO_NARROW: "That line is too short for the chosen entrance/exit type.",
    RUN_FAILED: "Run failed. Check the boundary and dimension inputs.",
}


def user_message(error_key: str | None, fallback: str = "Something went wrong.") -> str:
    """Return a user-facing message for the given error key."""
    if not error_key:
        return fallback
    return USER_MESSAGES.get(error_key, fallback)
