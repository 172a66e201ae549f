# src/tcg_marketplace/domain/repository.py
"""Telemetry Reader Protocol — rolling usage-event counts per item."""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession


class TelemetryReaderProtocol(Protocol):
    async def count_by_item(
        self, db: AsyncSession, event_name: str, since: datetime
    ) -> dict[str, int]: ...
