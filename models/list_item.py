"""
ListItem model for items of an ordered list.

Each item belongs to one list and carries an order_position key produced by
key_codec. Lists are read back with ORDER BY order_position COLLATE "C" so the
database agrees with Python's string ordering.
"""

from datetime import datetime, timezone
from typing import Optional, List, Dict, Any
from database import get_db_connection, save_to_history


_SELECT_COLUMNS = """
    SELECT list_item_id, list_id, label, order_position,
           created_date, last_modified_date
    FROM list_item
"""


class ListItem:
    """
    Model representing one item of an ordered list.
    """

    def __init__(
        self,
        list_item_id: Optional[int] = None,
        list_id: Optional[int] = None,
        label: str = "",
        order_position: Optional[str] = None,
        created_date: Optional[datetime] = None,
        last_modified_date: Optional[datetime] = None
    ):
        self.list_item_id = list_item_id
        self.list_id = list_id
        self.label = label
        self.order_position = order_position
        self.created_date = created_date
        self.last_modified_date = last_modified_date

        self._validate()

    def _validate(self) -> None:
        """
        Validate the ListItem instance data.

        Raises:
            ValueError: If validation fails
        """
        if self.list_item_id is not None and self.list_item_id <= 0:
            raise ValueError(f"list_item_id must be positive, got {self.list_item_id}")

        if self.list_id is not None and self.list_id <= 0:
            raise ValueError(f"list_id must be positive, got {self.list_id}")

        if not self.label or not self.label.strip():
            raise ValueError("label must not be empty")

    def validate_for_save(self) -> None:
        """
        Validate that the instance has all required fields for database save.

        Raises:
            ValueError: If required fields are missing
        """
        self._validate()

        if self.list_id is None:
            raise ValueError("list_id is required for save")

        if not self.order_position:
            raise ValueError("order_position is required for save")

    @classmethod
    def _from_row(cls, row) -> 'ListItem':
        return cls(
            list_item_id=row[0],
            list_id=row[1],
            label=row[2],
            order_position=row[3],
            created_date=row[4],
            last_modified_date=row[5]
        )

    def update_order_position(self, new_position: str, changed_by: str = 'system') -> None:
        """
        Store a new order key for this item.

        Args:
            new_position: Key generated by key_codec
            changed_by: User who made the change
        """
        if self.list_item_id is None:
            raise ValueError("Cannot update record without list_item_id")

        conn = get_db_connection()
        try:
            cur = conn.cursor()
            cur.execute("BEGIN")

            save_to_history(cur, 'list_item', 'UPDATE', self.list_item_id, changed_by)

            cur.execute("""
                UPDATE list_item
                SET order_position = %s,
                    last_modified_date = (NOW() AT TIME ZONE 'UTC')
                WHERE list_item_id = %s
            """, (new_position, self.list_item_id))

            cur.execute("COMMIT")
            self.order_position = new_position
            self.last_modified_date = datetime.now(timezone.utc)

        except Exception as e:
            cur.execute("ROLLBACK")
            raise e
        finally:
            conn.close()

    def save(self, changed_by: str = 'system') -> 'ListItem':
        """
        Save the ListItem to the database.

        Args:
            changed_by: User who created/modified the record

        Returns:
            ListItem: The saved instance with updated fields

        Raises:
            ValueError: If validation fails or required fields are missing
        """
        self.validate_for_save()

        conn = get_db_connection()
        try:
            cur = conn.cursor()
            cur.execute("BEGIN")

            if self.list_item_id is None:
                cur.execute("""
                    INSERT INTO list_item (
                        list_id, label, order_position, created_date, last_modified_date
                    ) VALUES (%s, %s, %s,
                             (NOW() AT TIME ZONE 'UTC'), (NOW() AT TIME ZONE 'UTC'))
                    RETURNING list_item_id, created_date, last_modified_date
                """, (self.list_id, self.label, self.order_position))

                result = cur.fetchone()
                self.list_item_id = result[0]
                self.created_date = result[1]
                self.last_modified_date = result[2]

                save_to_history(cur, 'list_item', 'INSERT', self.list_item_id, changed_by)
            else:
                save_to_history(cur, 'list_item', 'UPDATE', self.list_item_id, changed_by)
                cur.execute("""
                    UPDATE list_item
                    SET label = %s,
                        order_position = %s,
                        last_modified_date = (NOW() AT TIME ZONE 'UTC')
                    WHERE list_item_id = %s
                """, (self.label, self.order_position, self.list_item_id))

            cur.execute("COMMIT")
            return self

        except Exception as e:
            cur.execute("ROLLBACK")
            raise e
        finally:
            conn.close()

    @classmethod
    def get_by_id(cls, list_item_id: int) -> Optional['ListItem']:
        """
        Retrieve a ListItem by its ID.

        Returns:
            ListItem instance or None if not found
        """
        conn = get_db_connection()
        try:
            cur = conn.cursor()
            cur.execute(_SELECT_COLUMNS + " WHERE list_item_id = %s", (list_item_id,))

            row = cur.fetchone()
            return cls._from_row(row) if row else None

        finally:
            conn.close()

    @classmethod
    def get_for_list(cls, list_id: int) -> List['ListItem']:
        """
        Retrieve all items of a list in key order.

        Args:
            list_id: The list's ID

        Returns:
            List of ListItem instances
        """
        conn = get_db_connection()
        try:
            cur = conn.cursor()
            cur.execute(
                _SELECT_COLUMNS + ' WHERE list_id = %s ORDER BY order_position COLLATE "C"',
                (list_id,)
            )
            return [cls._from_row(row) for row in cur.fetchall()]

        finally:
            conn.close()

    def delete(self, changed_by: str = 'system') -> bool:
        """
        Delete the ListItem from the database.

        Returns:
            bool: True if deleted, False if record didn't exist
        """
        if self.list_item_id is None:
            return False

        conn = get_db_connection()
        try:
            cur = conn.cursor()
            cur.execute("BEGIN")

            save_to_history(cur, 'list_item', 'DELETE', self.list_item_id, changed_by)

            cur.execute("""
                DELETE FROM list_item WHERE list_item_id = %s
            """, (self.list_item_id,))

            deleted = cur.rowcount > 0
            cur.execute("COMMIT")

            if deleted:
                self.list_item_id = None

            return deleted

        except Exception as e:
            cur.execute("ROLLBACK")
            raise e
        finally:
            conn.close()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'list_item_id': self.list_item_id,
            'list_id': self.list_id,
            'label': self.label,
            'order_position': self.order_position,
            'created_date': self.created_date.isoformat() if self.created_date else None,
            'last_modified_date': self.last_modified_date.isoformat() if self.last_modified_date else None
        }

    def __repr__(self) -> str:
        return (
            f"ListItem(list_item_id={self.list_item_id}, list_id={self.list_id}, "
            f"label='{self.label}', order_position='{self.order_position}')"
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, ListItem):
            return False
        return (
            self.list_item_id == other.list_item_id and
            self.list_id == other.list_id and
            self.label == other.label and
            self.order_position == other.order_position
        )
