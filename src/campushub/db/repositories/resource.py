"""Resource repository: combined full-text and substring search."""

from sqlalchemy import Float, Select, case, func, literal, literal_column, or_, select

from campushub.db.models.resource import Course, Resource, User
from campushub.db.repositories.base import BaseRepository

LIKE_ESCAPE = "\\"


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so ``value`` is matched literally."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def headline_options(min_words: int, max_words: int) -> str:
    """ts_headline option string marking matched words with <mark>."""
    return f"StartSel=<mark>, StopSel=</mark>, MaxWords={max_words}, MinWords={min_words}"


class ResourceRepository(BaseRepository[Resource, int]):
    """Repository for Resource read queries."""

    model = Resource

    def build_hybrid_search_statement(
        self,
        query: str,
        *,
        limit: int,
        text_match_offset: float,
        substring_score: float,
        text_search_config: str = "english",
        excerpt_chars: int = 120,
        headline_min_words: int = 15,
        headline_max_words: int = 35,
    ) -> Select:
        """Build the single statement used for hybrid search.

        A resource matches when its text-search vector matches
        ``plainto_tsquery(query)`` or when its title or body contains
        ``query`` case-insensitively. Text-search matches score
        ``ts_rank + text_match_offset``; substring-only matches score
        ``substring_score``. Ordered by score, then view count, then id.

        Args:
            query: Trimmed, non-empty query text
            limit: Maximum rows to return
            text_match_offset: Score added to ts_rank for text-search matches
            substring_score: Fixed score for substring-only matches
            text_search_config: PostgreSQL text search configuration name
            excerpt_chars: Body prefix length selected for snippets
            headline_min_words: ts_headline MinWords
            headline_max_words: ts_headline MaxWords

        Returns:
            Executable select statement (PostgreSQL only)
        """
        # config name is validated by SearchConfig against ^[a-z_]+$
        ts_config = literal_column(f"'{text_search_config}'::regconfig")
        tsquery = func.plainto_tsquery(ts_config, query)
        text_match = Resource.tsv_content.op("@@", is_comparison=True)(tsquery)

        pattern = f"%{escape_like(query)}%"
        substring_match = or_(
            Resource.title.ilike(pattern, escape=LIKE_ESCAPE),
            Resource.content_detail.ilike(pattern, escape=LIKE_ESCAPE),
        )

        relevance = func.ts_rank(Resource.tsv_content, tsquery, type_=Float)
        rank_score = case(
            (text_match, relevance + text_match_offset),
            else_=literal(substring_score, Float),
        ).label("rank_score")

        headline = case(
            (
                text_match,
                func.ts_headline(
                    ts_config,
                    Resource.content_detail,
                    tsquery,
                    headline_options(headline_min_words, headline_max_words),
                ),
            ),
            else_=None,
        ).label("headline")

        return (
            select(
                Resource.id,
                Resource.title,
                func.substr(Resource.content_detail, 1, excerpt_chars).label(
                    "body_excerpt_source"
                ),
                Resource.view_count,
                Resource.download_count,
                Resource.created_at,
                Resource.resource_url,
                Course.name.label("course_name"),
                Course.teacher.label("course_teacher"),
                User.username.label("author_name"),
                text_match.label("text_match"),
                case((text_match, relevance), else_=literal(0.0, Float)).label(
                    "relevance_score"
                ),
                headline,
                rank_score,
            )
            .join(Course, Resource.course_id == Course.id)
            .join(User, Resource.user_id == User.id)
            .where(or_(text_match, substring_match))
            .order_by(
                literal_column("rank_score").desc(),
                Resource.view_count.desc(),
                Resource.id.asc(),
            )
            .limit(limit)
        )

    async def search_hybrid(self, query: str, *, limit: int, **options) -> list:
        """Execute the hybrid search statement.

        Args:
            query: Trimmed, non-empty query text
            limit: Maximum rows to return
            **options: Forwarded to ``build_hybrid_search_statement``

        Returns:
            Result rows with the labelled columns of the statement
        """
        stmt = self.build_hybrid_search_statement(query, limit=limit, **options)
        result = await self.db.execute(stmt)
        return list(result.mappings().all())
