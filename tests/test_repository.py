"""Tests for the SQLAlchemy repositories and keyword filter rendering."""

from datetime import datetime
from unittest.mock import Mock

import pytest
from sqlalchemy.dialects import sqlite
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from collab_board.adapters.store.database import db_session
from collab_board.adapters.store.models import Activist
from collab_board.adapters.store.repository import (
    AdminCredentialRepository,
    PostRepository,
    keyword_clause,
)
from collab_board.core.errors import NotFoundAppError, StoreAppError
from collab_board.services.query_parser import parse_keyword_query


def _positional_params(clause) -> list:
    compiled = clause.compile(dialect=sqlite.dialect())
    return [compiled.params[name] for name in compiled.positiontup]


def test_placeholders_follow_pattern_order() -> None:
    keyword_filter = parse_keyword_query('"x" cat AND mouse OR dog')
    clause = keyword_clause(keyword_filter, Activist.interest)

    assert keyword_filter.patterns == ("x", "cat", "mouse", "dog")
    assert _positional_params(clause) == list(keyword_filter.patterns)


def test_rendered_clause_shape() -> None:
    clause = keyword_clause(parse_keyword_query('"x" cat OR dog'), Activist.interest)
    sql = str(clause.compile(dialect=sqlite.dialect()))

    assert sql.count("LIKE") == 3
    assert " OR " in sql
    assert " AND " in sql


def test_wildcards_in_terms_are_escaped() -> None:
    clause = keyword_clause(parse_keyword_query("50%_off"), Activist.interest)

    assert _positional_params(clause) == ["50/%/_off"]


def test_search_combines_keyword_and_location(session) -> None:
    repo = PostRepository(session)
    repo.add(interest="community garden", location="Berlin", signal_username="a", alias=None, password_hash=None)
    repo.add(interest="community garden", location="Paris", signal_username="b", alias=None, password_hash=None)
    repo.add(interest="bike repair", location="Berlin", signal_username="c", alias=None, password_hash=None)
    created_after = datetime(2000, 1, 1)

    found = repo.search(
        created_after=created_after,
        keyword_filter=parse_keyword_query("garden"),
        location="berlin",
    )

    assert [(post.interest, post.location) for post in found] == [("community garden", "Berlin")]


def test_delete_reports_whether_a_row_was_removed(session) -> None:
    repo = PostRepository(session)
    post = repo.add(interest="x", location="Online", signal_username="a", alias=None, password_hash=None)

    assert repo.delete(post.id) is True
    assert repo.delete(post.id) is False


def test_compare_and_swap_checks_version(session) -> None:
    repo = AdminCredentialRepository(session)
    repo.create("hash-1")

    assert repo.compare_and_swap(expected_version=1, password_hash="hash-2") is True
    assert repo.compare_and_swap(expected_version=1, password_hash="hash-3") is False
    assert repo.get().password_hash == "hash-2"
    assert repo.get().version == 2


def test_driver_errors_become_store_errors() -> None:
    session = Mock(spec=Session)
    session.get.side_effect = OperationalError("SELECT 1", {}, Exception("disk I/O error"))

    with pytest.raises(StoreAppError) as exc_info:
        PostRepository(session).get(1)

    assert exc_info.value.code == "store_error"
    assert "disk" not in exc_info.value.message


def test_commit_failure_becomes_store_error() -> None:
    session = Mock(spec=Session)
    session.commit.side_effect = OperationalError("COMMIT", {}, Exception("database is locked"))

    with pytest.raises(StoreAppError) as exc_info:
        with db_session(Mock(return_value=session)):
            pass

    assert exc_info.value.code == "store_error"
    assert "locked" not in exc_info.value.message
    session.rollback.assert_called_once()
    session.close.assert_called_once()


def test_domain_errors_roll_back_without_commit() -> None:
    session = Mock(spec=Session)

    with pytest.raises(NotFoundAppError):
        with db_session(Mock(return_value=session)):
            raise NotFoundAppError(code="post_not_found", message="Post not found")

    session.commit.assert_not_called()
    session.rollback.assert_called_once()
    session.close.assert_called_once()


def test_phrase_alternative_renders_as_plain_disjunction() -> None:
    clause = keyword_clause(parse_keyword_query('"community garden" OR market'), Activist.interest)
    sql = str(clause.compile(dialect=sqlite.dialect()))

    assert " OR " in sql
    assert " AND " not in sql
    assert _positional_params(clause) == ["community garden", "market"]
