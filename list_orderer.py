"""
Reordering operations for lists ordered by fractional keys.

ListOrderer works on any collection exposed through a SortableProvider. Every
operation re-sorts the collection by key, picks the two neighbouring keys that
bound the requested position, and writes one new key onto one item. No other
item is ever rewritten, whatever the length of the list.

Missing items are handled on a best-effort basis rather than raised, because
reorders usually come from a UI that may be looking at a stale copy of the list:
    - move / move_to with an unknown item to move do nothing
    - move / move_to with an unknown target do nothing (logged as a warning)
    - insert_before with an unknown item does nothing
    - insert_before with an unknown (or no) anchor appends to the end
"""

import logging
from typing import Any, Callable, List, Optional

from key_codec import generate_between

logger = logging.getLogger(__name__)

BEFORE = "before"
AFTER = "after"
VALID_SIDES = {BEFORE, AFTER}


class SortableProvider:
    """
    Access to a caller-owned collection of items that carry an order key.

    Subclasses expose enumeration plus three accessors. Items are opaque to the
    orderer; it never creates or deletes them.
    """

    def get_items(self) -> List[Any]:
        """Return every item in the collection, in any order."""
        raise NotImplementedError

    def get_item_id(self, item: Any) -> Any:
        raise NotImplementedError

    def get_item_order(self, item: Any) -> str:
        raise NotImplementedError

    def set_item_order(self, item: Any, order: str) -> None:
        """Store a new order key on the item."""
        raise NotImplementedError


class CallbackSortableProvider(SortableProvider):
    """SortableProvider assembled from four plain functions."""

    def __init__(
        self,
        get_items: Callable[[], List[Any]],
        get_item_id: Callable[[Any], Any],
        get_item_order: Callable[[Any], str],
        set_item_order: Callable[[Any, str], None]
    ):
        self._get_items = get_items
        self._get_item_id = get_item_id
        self._get_item_order = get_item_order
        self._set_item_order = set_item_order

    def get_items(self) -> List[Any]:
        return list(self._get_items())

    def get_item_id(self, item: Any) -> Any:
        return self._get_item_id(item)

    def get_item_order(self, item: Any) -> str:
        return self._get_item_order(item)

    def set_item_order(self, item: Any, order: str) -> None:
        self._set_item_order(item, order)


class ListOrderer:
    """
    Move, insert and append items of a list by assigning a single new key.

    The write methods return the key they assigned, or None when the call was
    a no-op.
    """

    def __init__(
        self,
        provider: SortableProvider,
        key_generator: Callable[[Optional[str], Optional[str]], str] = generate_between
    ):
        self.provider = provider
        self.key_generator = key_generator

    def ordered_items(self) -> List[Any]:
        """Return the items sorted ascending by key. Never cached."""
        return sorted(self.provider.get_items(), key=self.provider.get_item_order)

    def largest_order(self) -> Optional[str]:
        items = self.ordered_items()
        return self.provider.get_item_order(items[-1]) if items else None

    def smallest_order(self) -> Optional[str]:
        items = self.ordered_items()
        return self.provider.get_item_order(items[0]) if items else None

    def new_trailing_key(self) -> str:
        """Get a new key at the end of the list."""
        return self.key_generator(self.largest_order(), None)

    def move(self, from_id: Any, to_id: Any) -> Optional[str]:
        """
        Move an item onto the position of another item.

        Dropping an item onto a target visually places it in the target's slot
        and pushes the target one step back towards where the item came from.
        Moving forward the item lands just after the target, moving backward
        just before it.

        Args:
            from_id: ID of the item being moved
            to_id: ID of the item it is dropped onto

        Returns:
            The new key, or None if either item is missing
        """
        items = self.ordered_items()
        from_index = self._index_of(items, from_id)
        to_index = self._index_of(items, to_id)
        if from_index == -1:
            logger.debug(f"move: item {from_id!r} not in list, nothing to do")
            return None
        if to_index == -1:
            logger.warning(f"move: target {to_id!r} not in list, leaving {from_id!r} in place")
            return None

        to_order = self._order_at(items, to_index)
        if from_index < to_index:
            bounds = (to_order, self._order_at(items, to_index + 1))
        else:
            bounds = (self._order_at(items, to_index - 1), to_order)

        return self._assign(items[from_index], *bounds)

    def move_to(self, from_id: Any, to_id: Any, side: str) -> Optional[str]:
        """
        Move an item directly before or after another item.

        Args:
            from_id: ID of the item being moved
            to_id: ID of the anchor item
            side: 'before' or 'after'

        Returns:
            The new key, or None if either item is missing

        Raises:
            ValueError: If side is not 'before' or 'after'
        """
        if side not in VALID_SIDES:
            raise ValueError(f"side must be one of {sorted(VALID_SIDES)}, got '{side}'")

        items = self.ordered_items()
        from_index = self._index_of(items, from_id)
        if from_index == -1:
            logger.debug(f"move_to: item {from_id!r} not in list, nothing to do")
            return None
        to_index = self._index_of(items, to_id)
        if to_index == -1:
            logger.warning(f"move_to: target {to_id!r} not in list, leaving {from_id!r} in place")
            return None

        to_order = self._order_at(items, to_index)
        if side == BEFORE:
            bounds = (self._order_at(items, to_index - 1), to_order)
        else:
            bounds = (to_order, self._order_at(items, to_index + 1))

        return self._assign(items[from_index], *bounds)

    def insert_before(self, item_id: Any, before_id: Any = None) -> Optional[str]:
        """
        Place an item immediately before another item.

        With items | a | b | c |:
            insert_before('b', None) -> | a | c | b |
            insert_before('b', 'a')  -> | b | a | c |

        An unknown before_id is treated like None and appends the item.

        Returns:
            The new key, or None if item_id is not in the list
        """
        items = self.ordered_items()
        item_index = self._index_of(items, item_id)
        if item_index == -1:
            logger.debug(f"insert_before: item {item_id!r} not in list, nothing to do")
            return None
        item = items[item_index]

        before_index = self._index_of(items, before_id) if before_id is not None else -1
        if before_index == -1:
            others = [i for i in items if self.provider.get_item_id(i) != item_id]
            lower = self.provider.get_item_order(others[-1]) if others else None
            return self._assign(item, lower, None)

        return self._assign(
            item,
            self._order_at(items, before_index - 1),
            self._order_at(items, before_index)
        )

    def _index_of(self, items: List[Any], item_id: Any) -> int:
        for index, item in enumerate(items):
            if self.provider.get_item_id(item) == item_id:
                return index
        return -1

    def _order_at(self, items: List[Any], index: int) -> Optional[str]:
        # Out-of-range neighbours (including index -1) mean an open bound
        if 0 <= index < len(items):
            return self.provider.get_item_order(items[index])
        return None

    def _assign(self, item: Any, lower: Optional[str], upper: Optional[str]) -> str:
        new_order = self.key_generator(lower, upper)
        self.provider.set_item_order(item, new_order)
        return new_order


def create_sortable_helper(provider: SortableProvider) -> ListOrderer:
    """Build a ListOrderer over the given provider."""
    return ListOrderer(provider)
