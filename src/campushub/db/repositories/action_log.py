"""Action log repository: search event writes and payload aggregation."""

from ipaddress import ip_address

import structlog
from sqlalchemy import func, insert, select

from campushub.db.models.action_log import ActionLog, ActionType
from campushub.db.repositories.base import BaseRepository

logger = structlog.get_logger()


def normalize_ip_address(value: str | None) -> str | None:
    """Return ``value`` as a canonical IP address string, or None if it is not one.

    Client addresses come from proxy headers and may be hostnames or junk;
    the ``ip_addr`` column only accepts real addresses.
    """
    if not value:
        return None
    try:
        return str(ip_address(value.strip()))
    except ValueError:
        logger.debug("client_address_not_an_ip", value=value)
        return None


class ActionLogRepository(BaseRepository[ActionLog, int]):
    """Repository for ActionLog operations."""

    model = ActionLog

    async def log_search(
        self,
        query_text: str,
        *,
        user_id: int | None = None,
        ip_addr: str | None = None,
        commit: bool = True,
    ) -> int:
        """Append a SEARCH event.

        Args:
            query_text: The trimmed query as typed by the user
            user_id: Authenticated user, if any
            ip_addr: Client network address
            commit: Whether to commit the transaction

        Returns:
            Id of the new entry
        """
        # Entries are never read back through the identity map
        stmt = (
            insert(ActionLog)
            .values(
                user_id=user_id,
                action_type=ActionType.SEARCH.value,
                payload=query_text,
                ip_addr=normalize_ip_address(ip_addr),
            )
            .returning(ActionLog.id)
        )
        entry_id = (await self.db.execute(stmt)).scalar_one()
        if commit:
            await self.db.commit()
        return entry_id

    async def top_payloads(
        self,
        action_type: ActionType,
        *,
        limit: int,
        min_length: int = 1,
    ) -> list[tuple[str, int]]:
        """Most frequent payloads for an action type.

        Args:
            action_type: Which events to aggregate
            limit: Maximum number of payloads to return
            min_length: Minimum payload length in characters

        Returns:
            (payload, count) pairs, count descending then payload ascending
        """
        frequency = func.count().label("frequency")
        stmt = (
            select(ActionLog.payload, frequency)
            .where(
                ActionLog.action_type == action_type.value,
                ActionLog.payload.is_not(None),
                func.length(ActionLog.payload) >= max(min_length, 1),
            )
            .group_by(ActionLog.payload)
            .order_by(frequency.desc(), ActionLog.payload.asc())
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return [(payload, int(count)) for payload, count in result.all()]
