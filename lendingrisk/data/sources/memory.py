"""In-memory data source backed by raw payloads."""

import logging
from typing import Any, Dict, List, Optional

from lendingrisk.core.constants import NO_EMODE_CATEGORY
from lendingrisk.core.models import ReferenceCurrencyConversion, ReserveSnapshot, UserReservePosition
from lendingrisk.data.parser import SnapshotParser
from lendingrisk.data.sources.base import ReserveDataSource

logger = logging.getLogger(__name__)


class InMemoryDataSource(ReserveDataSource):
    """
    Serves snapshots from payload dicts already fetched by the caller.

    Payloads are parsed on every call so each evaluation gets fresh,
    independent snapshot objects.
    """

    def __init__(
        self,
        pool_data: Dict[str, Any],
        user_reserves: Optional[Dict[str, List[Dict[str, Any]]]] = None,
        user_emode_categories: Optional[Dict[str, int]] = None,
    ):
        self.pool_data = pool_data
        self.user_reserves = {k.lower(): v for k, v in (user_reserves or {}).items()}
        self.user_emode_categories = {k.lower(): v for k, v in (user_emode_categories or {}).items()}

    def get_reserves(self) -> List[ReserveSnapshot]:
        reserves = SnapshotParser.parse_reserves(self.pool_data.get("reserves") or [])
        logger.debug(f"Loaded {len(reserves)} reserves")
        return reserves

    def get_user_positions(self, user_address: str) -> List[UserReservePosition]:
        return SnapshotParser.parse_user_positions(self.user_reserves.get(user_address.lower(), []))

    def get_conversion(self) -> ReferenceCurrencyConversion:
        return SnapshotParser.parse_conversion(self.pool_data)

    def get_user_emode_category(self, user_address: str) -> int:
        return self.user_emode_categories.get(user_address.lower(), NO_EMODE_CATEGORY)
