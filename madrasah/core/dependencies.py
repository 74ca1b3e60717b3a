"""
Request-scoped dependencies: a repository bound to the app context and the
signed-in user, and the 404 raised when a row is missing.
"""

from fastapi import Depends, HTTPException, status

from madrasah.core.context import AppContext, get_context
from madrasah.core.security import get_current_user
from madrasah.schemas.auth import CurrentUser


def repository(repo_cls):
    """``Depends(repository(StudentRepository))`` → a StudentRepository for this request."""

    def build(
        ctx: AppContext = Depends(get_context),
        user: CurrentUser = Depends(get_current_user),
    ):
        return repo_cls(ctx, user.user_id)

    return build


def not_found(what: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{what} not found")


def first_row(rows: list, what: str) -> dict:
    """A write touched no row (wrong id, or hidden by row-level policy)."""
    if not rows:
        raise not_found(what)
    return rows[0]
