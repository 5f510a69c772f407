"""
Page-size handling shared by the list views.
"""

from flask import current_app


def resolve_per_page(requested: int | None) -> int:
    """
    Return the page size to use for a list request.

    Only the sizes in ``PAGE_SIZE_OPTIONS`` are honoured; anything else
    (missing, non-numeric, or outside the list) falls back to
    ``ROWS_PER_PAGE``.
    """
    if requested in current_app.config["PAGE_SIZE_OPTIONS"]:
        return requested
    return current_app.config["ROWS_PER_PAGE"]
