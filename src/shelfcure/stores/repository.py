from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from .model import Store


class StoreRepository(Protocol):
    def get_by_id(self, store_id: int) -> Optional[Store]:
        raise NotImplementedError

    def get_for_owner(self, store_id: int, owner_id: int) -> Optional[Store]:
        raise NotImplementedError

    def list_for_owner(
        self,
        owner_id: int,
        *,
        search: Optional[str] = None,
        is_active: Optional[bool] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> tuple[Sequence[Store], int]:
        """Newest first. Returns ``(page, total matching)``."""

        raise NotImplementedError

    def list_by_ids(self, store_ids: Iterable[int]) -> Sequence[Store]:
        raise NotImplementedError

    def code_exists(self, code: str) -> bool:
        raise NotImplementedError

    def list_codes_with_prefix(self, prefix: str) -> Sequence[str]:
        raise NotImplementedError

    def create(self, *, owner_id: int, fields: dict) -> int:
        """``fields`` maps Store attribute names to values."""

        raise NotImplementedError

    def update(self, store_id: int, *, fields: dict, updated_by: int) -> bool:
        raise NotImplementedError

    def set_active(self, store_id: int, *, is_active: bool, updated_by: int) -> bool:
        raise NotImplementedError
