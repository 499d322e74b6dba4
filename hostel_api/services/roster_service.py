# hostel_api/services/roster_service.py

import json

import redis.asyncio as redis
from loguru import logger

from hostel_api.schemas.roster import RosterEntry


class RosterEntryNotFound(LookupError):
    pass


class InvalidRosterEntry(ValueError):
    pass


def roster_key(roll_no: str) -> str:
    return f"student:{roll_no}"


class RosterClient:
    """
    Read-only view of the pre-seeded student roster.

    Each entry is a JSON document stored under ``student:<roll_no>`` holding
    at least a name (``full_name`` or ``name``) and a ``gender``.
    """

    def __init__(self, client: redis.Redis):
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RosterClient":
        return cls(redis.from_url(url, decode_responses=True, socket_connect_timeout=5))

    async def get_entry(self, roll_no: str) -> RosterEntry:
        raw = await self._client.get(roster_key(roll_no))
        if raw is None:
            raise RosterEntryNotFound(roll_no)

        try:
            data = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning(f"Roster entry for {roll_no} is not valid JSON")
            raise InvalidRosterEntry(roll_no)

        if not isinstance(data, dict):
            raise InvalidRosterEntry(roll_no)

        full_name = data.get("full_name") or data.get("name")
        gender = data.get("gender")
        if not full_name or not gender:
            raise InvalidRosterEntry(roll_no)

        return RosterEntry(roll_no=roll_no, full_name=str(full_name), gender=str(gender))

    async def close(self) -> None:
        await self._client.aclose()
