"""Unit tests for CampusHub repositories."""

import pytest
from sqlalchemy.dialects import postgresql

from campushub.db.models.action_log import ActionLog, ActionType
from campushub.db.models.resource import Course, Resource, User
from campushub.db.repositories import (
    ActionLogRepository,
    ResourceRepository,
    escape_like,
    normalize_ip_address,
)
from campushub.db.repositories.resource import headline_options


class TestNormalizeIpAddress:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("10.0.0.1", "10.0.0.1"),
            (" 10.0.0.1 ", "10.0.0.1"),
            ("2001:DB8::1", "2001:db8::1"),
            ("localhost", None),
            ("", None),
            (None, None),
        ],
    )
    def test_normalize(self, value, expected):
        assert normalize_ip_address(value) == expected


class TestEscapeLike:
    def test_plain_text_unchanged(self):
        assert escape_like("database") == "database"

    def test_wildcards_escaped(self):
        assert escape_like("100%_sure") == "100\\%\\_sure"

    def test_escape_character_escaped(self):
        assert escape_like("a\\b") == "a\\\\b"


class TestActionLogRepository:
    """Tests for ActionLogRepository against SQLite."""

    async def test_log_search(self, db_session):
        repo = ActionLogRepository(db_session)

        entry_id = await repo.log_search("operating systems", ip_addr="172.16.0.9")
        entry = await repo.get(entry_id)

        assert entry.action_type == ActionType.SEARCH.value
        assert entry.payload == "operating systems"
        assert entry.ip_addr == "172.16.0.9"
        assert entry.created_at is not None
        assert await repo.count() == 1

    async def test_log_search_with_user(self, db_session):
        db_session.add(User(id=5, username="erin"))
        await db_session.commit()
        repo = ActionLogRepository(db_session)

        entry_id = await repo.log_search("networks", user_id=5)

        assert (await repo.get(entry_id)).user_id == 5

    async def test_top_payloads_only_counts_searches(self, db_session):
        repo = ActionLogRepository(db_session)
        for text in ["networks", "networks", "compilers"]:
            await repo.log_search(text, commit=False)
        db_session.add(ActionLog(action_type=ActionType.CLICK_LINK.value, payload="networks"))
        db_session.add(ActionLog(action_type=ActionType.CLICK_LINK.value, payload="networks"))
        await db_session.flush()

        top = await repo.top_payloads(ActionType.SEARCH, limit=10)

        assert top == [("networks", 2), ("compilers", 1)]

    async def test_top_payloads_skips_null_and_short(self, db_session):
        repo = ActionLogRepository(db_session)
        db_session.add(ActionLog(action_type=ActionType.SEARCH.value, payload=None))
        db_session.add(ActionLog(action_type=ActionType.SEARCH.value, payload=""))
        for text in ["a", "a", "ai"]:
            await repo.log_search(text, commit=False)

        assert await repo.top_payloads(ActionType.SEARCH, limit=10, min_length=2) == [("ai", 1)]
        assert await repo.top_payloads(ActionType.SEARCH, limit=10, min_length=1) == [
            ("a", 2),
            ("ai", 1),
        ]

    async def test_top_payloads_tie_order(self, db_session):
        repo = ActionLogRepository(db_session)
        for text in ["zoology", "algebra", "zoology", "algebra"]:
            await repo.log_search(text, commit=False)

        top = await repo.top_payloads(ActionType.SEARCH, limit=1)

        assert top == [("algebra", 2)]


class TestResourceRepository:
    """Tests for the hybrid search statement (PostgreSQL dialect)."""

    def _compile(self, db_session, query="database", **overrides) -> tuple[str, list]:
        options = {
            "limit": 20,
            "text_match_offset": 1.0,
            "substring_score": 0.5,
        }
        options.update(overrides)
        stmt = ResourceRepository(db_session).build_hybrid_search_statement(query, **options)
        compiled = stmt.compile(dialect=postgresql.dialect())
        return str(compiled), list(compiled.params.values())

    def test_uses_full_text_and_substring_predicates(self, db_session):
        sql, params = self._compile(db_session)

        assert "plainto_tsquery('english'::regconfig," in sql
        assert "@@" in sql
        assert "ILIKE" in sql
        assert "database" in params
        assert "%database%" in params

    def test_scores_and_headline(self, db_session):
        sql, params = self._compile(db_session)

        assert "ts_rank(" in sql
        assert "ts_headline(" in sql
        assert "StartSel=<mark>, StopSel=</mark>, MaxWords=35, MinWords=15" in params
        assert 1.0 in params
        assert 0.5 in params

    def test_joins_course_and_author(self, db_session):
        sql, _ = self._compile(db_session)

        assert f"JOIN {Course.__tablename__} ON" in sql
        assert f"JOIN {User.__tablename__} ON" in sql

    def test_orders_by_score_views_id(self, db_session):
        sql, params = self._compile(db_session)

        order_by = sql.split("ORDER BY", 1)[1]
        table = Resource.__tablename__
        assert order_by.index("rank_score DESC") < order_by.index(f"{table}.view_count DESC")
        assert order_by.index(f"{table}.view_count DESC") < order_by.index(f"{table}.id ASC")
        assert "LIMIT" in order_by
        assert 20 in params

    def test_wildcards_escaped_in_pattern(self, db_session):
        _, params = self._compile(db_session, query="50%_off")

        assert "%50\\%\\_off%" in params

    def test_text_search_config(self, db_session):
        sql, _ = self._compile(db_session, text_search_config="simple")

        assert "'simple'::regconfig" in sql

    def test_excerpt_length(self, db_session):
        sql, params = self._compile(db_session, excerpt_chars=80)

        assert "substr(" in sql
        assert 80 in params

    def test_headline_options(self):
        assert headline_options(10, 20) == (
            "StartSel=<mark>, StopSel=</mark>, MaxWords=20, MinWords=10"
        )
