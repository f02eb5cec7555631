"""Contribution ledger: point totals and the tiers derived from them."""

import logging

from sqlalchemy import case, update
from sqlalchemy.orm import Session
from sqlalchemy.sql.expression import Case, ColumnElement

from paperhub.exceptions import NotFound, ValidationFailure
from paperhub.models.enums import LEVEL_THRESHOLDS, Level
from paperhub.models.user import User

logger = logging.getLogger(__name__)

users_table = User.__table__


def level_for_points(points: int) -> Level:
    """Highest tier whose threshold the point total reaches."""
    if points < 0:
        raise ValueError("points cannot be negative")
    for threshold, level in LEVEL_THRESHOLDS:
        if points >= threshold:
            return level
    return Level.SILVER


def _level_expression(points_expr: ColumnElement[int]) -> Case[str]:
    """SQL CASE mirroring level_for_points, evaluated inside the store."""
    return case(
        *[(points_expr >= threshold, level.value) for threshold, level in LEVEL_THRESHOLDS],
        else_=Level.SILVER.value,
    )


def award_points(db: Session, user_id: str, delta: int) -> tuple[int, Level]:
    """Apply a point delta to a user and recompute their level.

    Points and level are written by a single UPDATE so the increment happens
    in the store. Reading points into Python and writing them back would lose
    concurrent awards for the same user.

    Returns the post-award (points, level).
    """
    new_points = users_table.c.points + delta
    stmt = (
        update(users_table)
        .where(users_table.c.id == user_id)
        .values(points=new_points, level=_level_expression(new_points))
        .returning(users_table.c.points, users_table.c.level)
    )
    if delta < 0:
        stmt = stmt.where(new_points >= 0)

    row = db.execute(stmt).first()
    if row is None:
        db.rollback()
        if db.query(User.id).filter(User.id == user_id).first() is None:
            raise NotFound("User not found")
        raise ValidationFailure("Points cannot go below zero")
    db.commit()

    points, level = row.points, Level(row.level)
    previous = level_for_points(max(points - delta, 0))
    if previous != level:
        logger.info(f"User {user_id} moved from {previous.value} to {level.value} at {points}")
    logger.info(f"Awarded {delta} points to user {user_id} (total {points})")
    return points, level


def increment_downloads(db: Session, user_id: str) -> int:
    """Atomically bump a user's download counter and return the new value."""
    stmt = (
        update(users_table)
        .where(users_table.c.id == user_id)
        .values(downloads=users_table.c.downloads + 1)
        .returning(users_table.c.downloads)
    )
    row = db.execute(stmt).first()
    if row is None:
        db.rollback()
        raise NotFound("User not found")
    db.commit()
    return row.downloads
