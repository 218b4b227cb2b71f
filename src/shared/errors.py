class SlugConflictError(ValueError):
    """Raised when a slug is already used by another record of the same table."""

    pass


class DuplicateContentError(ValueError):
    """Raised when a category/sub-category pair already has a page."""

    pass
