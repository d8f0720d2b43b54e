"""Error kinds raised by the highlight store."""


class HighlightError(Exception):
    """Base exception for all highlight store errors."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(self.detail)


class InvalidInput(HighlightError):
    """Raised when the caller supplies a payload that breaks a precondition."""

    def __init__(self, detail: str = "Invalid input"):
        super().__init__(detail)


class DuplicateHighlight(HighlightError):
    """Raised when a member already has the given highlight."""

    def __init__(self, member_id: int, highlight_text: str):
        self.member_id = member_id
        self.highlight_text = highlight_text
        super().__init__(f"Member {member_id} already highlighted {highlight_text!r}")


class StorageUnavailable(HighlightError):
    """Raised when the database could not be reached or the operation failed."""

    def __init__(self, detail: str = "Highlight storage is unavailable"):
        super().__init__(detail)
