from __future__ import annotations


class TableStructureError(ValueError):
    """Raised when the canvas does not hold the tables a request needs.

    Covers "no tables found", "no root table" and "no endpoint tables". The
    message is meant to be shown to the user as-is.
    """
