"""Shared columns for users and posts."""

from sqlalchemy import Column, DateTime, func


class TimestampMixin:
    """Server-managed `created_at` / `updated_at` columns.

    `created_at` is never written by application code. `updated_at` is set by
    the database on insert and by `touch()` on every content or profile edit.
    """

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def touch(self) -> None:
        """Mark the row as modified now, using the database clock."""
        self.updated_at = func.now()
