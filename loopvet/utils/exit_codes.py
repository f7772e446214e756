"""Centralized exit codes for the loopvet CLI."""


class ExitCodes:
    """Standard exit codes for loopvet CLI commands."""

    SUCCESS = 0

    FINDINGS = 1

    TASK_INCOMPLETE = 3

    @classmethod
    def get_description(cls, code: int) -> str:
        """Get human-readable description for an exit code."""
        descriptions = {
            cls.SUCCESS: "Success - No issues found",
            cls.FINDINGS: "Captured loop variables detected",
            cls.TASK_INCOMPLETE: "Task could not be completed due to missing prerequisites",
        }
        return descriptions.get(code, f"Unknown exit code: {code}")
