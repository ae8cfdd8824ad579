"""Exceptions raised while assembling a book."""


class BookbinderError(Exception):
    """Base class for every assembly error."""


class ValidationError(BookbinderError, ValueError):
    """A required value is empty, mistyped or out of range."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        self.message = message
        super().__init__(message)


class InvalidLevelError(ValidationError):
    """Page level is not a non-negative integer."""

    def __init__(self, level: object):
        self.level = level
        super().__init__(
            f"Page level must be a non-negative integer, got {level!r}",
            field="level",
        )


class InvalidDateError(ValidationError):
    """Publication date is not a date value."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(
            f"Date object is not valid: {type(value).__name__}", field="date"
        )


class InvalidHierarchyError(BookbinderError):
    """Page level jumps more than one step deeper than its predecessor."""

    def __init__(self, level: int, previous_level: int | None):
        self.level = level
        self.previous_level = previous_level
        if previous_level is None:
            message = f"Invalid hierarchy: the first page must be at level 0, got level {level}"
        else:
            message = (
                f"Invalid hierarchy: level {level} cannot follow level "
                f"{previous_level} (maximum allowed is {previous_level + 1})"
            )
        super().__init__(message)


class UnsupportedFormatError(BookbinderError):
    """Resource bytes match no known image type."""


class UnknownLocaleError(BookbinderError):
    """Locale code has no label table."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Unknown Language: {code}")


class UnsupportedOutputTypeError(BookbinderError):
    """Requested archive output kind is not supported."""

    def __init__(self, output_kind: object):
        self.output_kind = output_kind
        super().__init__(f"Unsupported output type: {output_kind}")


class NotInitializedError(BookbinderError):
    """Assembler used before initialize()."""

    def __init__(self, operation: str = "generate"):
        self.operation = operation
        super().__init__(f"Cannot {operation}: call initialize() first")
