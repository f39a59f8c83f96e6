"""Tests for :mod:`user_service.services.filters`."""

from unittest import TestCase
from datetime import datetime

from pytz import UTC

from user_service.domain import FindUserFilter, Predicate
from user_service.services import filters


class TestBuildFindQuery(TestCase):
    """:func:`.build_find_query` turns search parameters into a query."""

    def test_no_parameters(self) -> None:
        """Only active users are selected, without paging."""
        query = filters.build_find_query(FindUserFilter())
        self.assertEqual(query.where, [filters.ACTIVE])
        self.assertIsNone(query.limit)
        self.assertIsNone(query.offset)
        self.assertFalse(query.include_credentials)

    def test_id_takes_precedence(self) -> None:
        """When ids are given, name and email are ignored."""
        params = FindUserFilter(id=[1, 2], name='Brad', email='a@b.c')
        query = filters.build_find_query(params)
        self.assertEqual(query.where,
                         [filters.ACTIVE, Predicate('id', Predicate.IN, [1, 2])])

    def test_name_over_email(self) -> None:
        """When a name is given, email is ignored."""
        params = FindUserFilter(name='Brad', email='a@b.c')
        query = filters.build_find_query(params)
        self.assertEqual(
            query.where,
            [filters.ACTIVE, Predicate('name', Predicate.CONTAINS, 'Brad')]
        )

    def test_email(self) -> None:
        """Email is matched exactly."""
        query = filters.build_find_query(FindUserFilter(email='a@b.c'))
        self.assertEqual(
            query.where,
            [filters.ACTIVE, Predicate('email', Predicate.EQ, 'a@b.c')]
        )

    def test_empty_id_list(self) -> None:
        """An empty list of ids does not restrict the results."""
        query = filters.build_find_query(FindUserFilter(id=[], name='Tom'))
        self.assertEqual(
            query.where,
            [filters.ACTIVE, Predicate('name', Predicate.CONTAINS, 'Tom')]
        )

    def test_updated_since(self) -> None:
        """Updated since is combined with the other conditions."""
        since = datetime(2020, 1, 1, tzinfo=UTC)
        params = FindUserFilter(email='a@b.c', updated_since=since)
        query = filters.build_find_query(params)
        self.assertIn(Predicate('updated_at', Predicate.GTE, since),
                      query.where)
        self.assertEqual(len(query.where), 3)

    def test_paging(self) -> None:
        """Limit and offset are applied only when non-zero."""
        query = filters.build_find_query(FindUserFilter(limit=10, offset=20))
        self.assertEqual(query.limit, 10)
        self.assertEqual(query.offset, 20)

        query = filters.build_find_query(FindUserFilter(limit=0, offset=0))
        self.assertIsNone(query.limit)
        self.assertIsNone(query.offset)

    def test_credentials(self) -> None:
        """Credentials are included on request."""
        query = filters.build_find_query(FindUserFilter(credentials=True))
        self.assertTrue(query.include_credentials)


class TestUniquePredicates(TestCase):
    """:func:`.unique_predicates` selects a single active user."""

    def test_by_id(self) -> None:
        """A user can be selected by id."""
        self.assertEqual(filters.unique_predicates({'id': 3}),
                         [filters.ACTIVE, Predicate('id', Predicate.EQ, 3)])

    def test_by_email(self) -> None:
        """A user can be selected by email."""
        self.assertEqual(
            filters.unique_predicates({'email': 'a@b.c'}),
            [filters.ACTIVE, Predicate('email', Predicate.EQ, 'a@b.c')]
        )

    def test_bad_shape(self) -> None:
        """Exactly one supported field is required."""
        with self.assertRaises(ValueError):
            filters.unique_predicates({})
        with self.assertRaises(ValueError):
            filters.unique_predicates({'id': 1, 'email': 'a@b.c'})
        with self.assertRaises(ValueError):
            filters.unique_predicates({'is_admin': True})
