"""
List ordering service layer.

Loads the items of one list, runs a ListOrderer operation over them and
persists the single key the operation produces. Results come back as
(success, message, payload) tuples so routes can turn them into responses.
"""

import logging
from typing import Optional, List, Tuple, Any

from key_codec import InvalidBoundOrderError
from list_orderer import CallbackSortableProvider, ListOrderer
from models.list_item import ListItem

logger = logging.getLogger(__name__)


class ListOrderService:
    """
    Service class for reordering the items of a list.

    Every write loads a fresh snapshot of the list, so the keys it reasons
    about are the ones currently stored.
    """

    def _build_orderer(self, items: List[ListItem], changed_by: str) -> ListOrderer:
        provider = CallbackSortableProvider(
            get_items=lambda: items,
            get_item_id=lambda item: item.list_item_id,
            get_item_order=lambda item: item.order_position,
            set_item_order=lambda item, order: item.update_order_position(order, changed_by=changed_by)
        )
        return ListOrderer(provider)

    @staticmethod
    def _missing(items: List[ListItem], list_id: int, *item_ids: Any) -> Optional[str]:
        known = {item.list_item_id for item in items}
        for item_id in item_ids:
            if item_id not in known:
                return f"Item {item_id} not found in list {list_id}"
        return None

    def get_ordered_items(self, list_id: int) -> List[ListItem]:
        """
        Retrieve the items of a list sorted by key.

        Returns:
            List of ListItem instances, empty on error
        """
        try:
            items = ListItem.get_for_list(list_id)
            return self._build_orderer(items, 'system').ordered_items()
        except Exception as e:
            logger.error(f"Error loading list {list_id}: {e}", exc_info=True)
            return []

    def append_item(
        self,
        list_id: int,
        label: str,
        changed_by: str = 'system'
    ) -> Tuple[bool, str, Optional[ListItem]]:
        """
        Create a new item at the end of a list.

        Args:
            list_id: ID of the list
            label: Display label of the new item
            changed_by: User who created the item

        Returns:
            Tuple of (success, message, list_item)
        """
        try:
            items = ListItem.get_for_list(list_id)
            order_position = self._build_orderer(items, changed_by).new_trailing_key()

            list_item = ListItem(list_id=list_id, label=label, order_position=order_position)
            saved_item = list_item.save(changed_by=changed_by)

            logger.info(f"Appended item {saved_item.list_item_id} to list {list_id}")
            return True, "Item added successfully", saved_item

        except ValueError as e:
            return False, f"Validation error: {str(e)}", None
        except Exception as e:
            logger.error(f"Error adding item to list {list_id}: {e}", exc_info=True)
            return False, f"Error adding item: {str(e)}", None

    @staticmethod
    def _get_list_item(list_id: int, item_id: int) -> Optional[ListItem]:
        list_item = ListItem.get_by_id(item_id)
        if list_item is None or list_item.list_id != list_id:
            return None
        return list_item

    def rename_item(
        self,
        list_id: int,
        item_id: int,
        label: str,
        changed_by: str = 'system'
    ) -> Tuple[bool, str, Optional[ListItem]]:
        """
        Change an item's label. Its order_position is saved unchanged.

        Returns:
            Tuple of (success, message, list_item)
        """
        try:
            list_item = self._get_list_item(list_id, item_id)
            if list_item is None:
                return False, f"Item {item_id} not found in list {list_id}", None

            list_item.label = label
            saved_item = list_item.save(changed_by=changed_by)
            return True, "Item updated successfully", saved_item

        except ValueError as e:
            return False, f"Validation error: {str(e)}", None
        except Exception as e:
            logger.error(f"Error updating item {item_id} in list {list_id}: {e}", exc_info=True)
            return False, f"Error updating item: {str(e)}", None

    def remove_item(
        self,
        list_id: int,
        item_id: int,
        changed_by: str = 'system'
    ) -> Tuple[bool, str, None]:
        """
        Delete an item from a list. No other item's key is rewritten.

        Returns:
            Tuple of (success, message, None)
        """
        try:
            list_item = self._get_list_item(list_id, item_id)
            if list_item is None or not list_item.delete(changed_by=changed_by):
                return False, f"Item {item_id} not found in list {list_id}", None

            logger.info(f"Removed item {item_id} from list {list_id}")
            return True, f"Item {item_id} removed", None

        except Exception as e:
            logger.error(f"Error deleting item {item_id} in list {list_id}: {e}", exc_info=True)
            return False, f"Error deleting item: {str(e)}", None

    def move_item(
        self,
        list_id: int,
        item_id: int,
        to_id: int,
        changed_by: str = 'system'
    ) -> Tuple[bool, str, Optional[str]]:
        """
        Drop an item onto the position of another item.

        Returns:
            Tuple of (success, message, new_order_position)
        """
        try:
            items = ListItem.get_for_list(list_id)
            missing = self._missing(items, list_id, item_id, to_id)
            if missing:
                return False, missing, None

            new_position = self._build_orderer(items, changed_by).move(item_id, to_id)
            return True, f"Item {item_id} moved", new_position

        except InvalidBoundOrderError as e:
            logger.warning(f"Cannot move item {item_id} in list {list_id}: {e}")
            return False, str(e), None
        except ValueError as e:
            return False, f"Validation error: {str(e)}", None
        except Exception as e:
            logger.error(f"Error moving item {item_id} in list {list_id}: {e}", exc_info=True)
            return False, f"Error moving item: {str(e)}", None

    def move_item_to(
        self,
        list_id: int,
        item_id: int,
        to_id: int,
        side: str,
        changed_by: str = 'system'
    ) -> Tuple[bool, str, Optional[str]]:
        """
        Move an item directly before or after another item.

        Returns:
            Tuple of (success, message, new_order_position)
        """
        try:
            items = ListItem.get_for_list(list_id)
            missing = self._missing(items, list_id, item_id, to_id)
            if missing:
                return False, missing, None

            new_position = self._build_orderer(items, changed_by).move_to(item_id, to_id, side)
            return True, f"Item {item_id} moved {side} item {to_id}", new_position

        except InvalidBoundOrderError as e:
            logger.warning(f"Cannot move item {item_id} in list {list_id}: {e}")
            return False, str(e), None
        except ValueError as e:
            return False, f"Validation error: {str(e)}", None
        except Exception as e:
            logger.error(f"Error moving item {item_id} in list {list_id}: {e}", exc_info=True)
            return False, f"Error moving item: {str(e)}", None

    def insert_item_before(
        self,
        list_id: int,
        item_id: int,
        before_id: Optional[int] = None,
        changed_by: str = 'system'
    ) -> Tuple[bool, str, Optional[str]]:
        """
        Place an item immediately before another one, or at the end when
        before_id is None or no longer in the list.

        Returns:
            Tuple of (success, message, new_order_position)
        """
        try:
            items = ListItem.get_for_list(list_id)
            missing = self._missing(items, list_id, item_id)
            if missing:
                return False, missing, None

            new_position = self._build_orderer(items, changed_by).insert_before(item_id, before_id)
            if before_id is None or self._missing(items, list_id, before_id):
                return True, f"Item {item_id} moved to the end", new_position
            return True, f"Item {item_id} moved before item {before_id}", new_position

        except InvalidBoundOrderError as e:
            logger.warning(f"Cannot move item {item_id} in list {list_id}: {e}")
            return False, str(e), None
        except ValueError as e:
            return False, f"Validation error: {str(e)}", None
        except Exception as e:
            logger.error(f"Error moving item {item_id} in list {list_id}: {e}", exc_info=True)
            return False, f"Error moving item: {str(e)}", None
