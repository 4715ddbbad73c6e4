"""Compile visibility predicates into SQLAlchemy WHERE clauses.

Field names are the domain names (region_id, created_by_id, id, region_ids);
each must exist as a column on the model, except set-valued fields which
are resolved through their association table.
"""

from typing import Any

from sqlalchemy import ColumnElement, and_, false, select, true

from app.domain.value_objects import (
    AllOf,
    AnyOverlap,
    FieldEquals,
    FieldIn,
    MatchAll,
    MatchNone,
    Predicate,
)
from app.infrastructure.persistence.models import User, UserRegion

# (model, set-valued field) -> (association table, owner fk, member fk)
_SET_FIELDS: dict[tuple[type, str], tuple[Any, Any, Any]] = {
    (User, "region_ids"): (UserRegion, UserRegion.user_id, UserRegion.region_id),
}


def _column(model: type, field: str) -> Any:
    column = getattr(model, field, None)
    if column is None:
        raise ValueError(f"{model.__name__} has no column {field!r}")
    return column


def compile_predicate(predicate: Predicate, model: type) -> ColumnElement[bool]:
    """Return a boolean clause equivalent to predicate.matches() for rows of model."""
    match predicate:
        case MatchAll():
            return true()
        case MatchNone():
            return false()
        case FieldIn(field=field, values=values):
            if not values:
                return false()
            return _column(model, field).in_(sorted(values))
        case FieldEquals(field=field, value=value):
            return _column(model, field) == value
        case AnyOverlap(field=field, values=values):
            if not values:
                return false()
            try:
                table, owner_fk, member_fk = _SET_FIELDS[(model, field)]
            except KeyError:
                raise ValueError(
                    f"{model.__name__}.{field} is not a set-valued field"
                ) from None
            owners = select(owner_fk).where(member_fk.in_(sorted(values)))
            return model.id.in_(owners)
        case AllOf(predicates=parts):
            return and_(true(), *(compile_predicate(p, model) for p in parts))
    raise TypeError(f"Unsupported predicate: {predicate!r}")
