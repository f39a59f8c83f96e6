"""Builds datastore queries from user search parameters."""

from typing import List, Mapping, Any

from ..domain import FindUserFilter, UserQuery, Predicate

ACTIVE = Predicate('email', Predicate.NOT_NULL)
"""Only users that have not been deleted."""

UNIQUE_FIELDS = ('id', 'email', 'name')


def build_find_query(params: FindUserFilter) -> UserQuery:
    """
    Build a :class:`.UserQuery` from :class:`.FindUserFilter` parameters.

    Only one of ``id``, ``name``, or ``email`` is applied, in that order of
    precedence; the others are ignored. ``limit`` and ``offset`` are only
    applied if they are non-zero.

    Parameters
    ----------
    params : :class:`.FindUserFilter`

    Returns
    -------
    :class:`.UserQuery`

    """
    where = [ACTIVE]
    if params.id:
        where.append(Predicate('id', Predicate.IN, list(params.id)))
    elif params.name:
        where.append(Predicate('name', Predicate.CONTAINS, params.name))
    elif params.email:
        where.append(Predicate('email', Predicate.EQ, params.email))

    if params.updated_since:
        where.append(
            Predicate('updated_at', Predicate.GTE, params.updated_since)
        )

    return UserQuery(
        where=where,
        limit=params.limit or None,
        offset=params.offset or None,
        include_credentials=bool(params.credentials)
    )


def unique_predicates(where_unique: Mapping[str, Any]) -> List[Predicate]:
    """
    Build conditions that select a single active user.

    Parameters
    ----------
    where_unique : dict
        Must have exactly one key, one of ``id``, ``email``, or ``name``.

    Returns
    -------
    list
        Items are :class:`.Predicate` instances.

    Raises
    ------
    ValueError
        Raised if ``where_unique`` does not have the expected shape.

    """
    if len(where_unique) != 1:
        raise ValueError('Expected exactly one of %s' % ', '.join(UNIQUE_FIELDS))
    (field, value), = where_unique.items()
    if field not in UNIQUE_FIELDS:
        raise ValueError(f'Cannot look up a user by {field}')
    return [ACTIVE, Predicate(field, Predicate.EQ, value)]
