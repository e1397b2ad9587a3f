import os
import psycopg2


# Tables whose rows are copied to a <table>_history table before they change
HISTORY_TABLES = {
    "list_item": ("list_item_id", "list_id, label, order_position, created_date, last_modified_date"),
}


def get_db_connection():
    conn = psycopg2.connect(
        host=os.environ.get("PGHOST"),
        database=os.environ.get("PGDATABASE"),
        user=os.environ.get("PGUSER"),
        password=os.environ.get("PGPASSWORD"),
        port=int(os.environ.get("PGPORT", 5432)),
    )
    return conn


def save_to_history(cur, table_name, operation, record_id, changed_by="system"):
    """Save a record to its history table before modification/deletion.

    Args:
        cur: Database cursor
        table_name: Name of the table being modified
        operation: 'INSERT', 'UPDATE', or 'DELETE'
        record_id: Primary key of the record
        changed_by: Who made the change, or 'system' for system actions
    """
    if table_name not in HISTORY_TABLES:
        raise ValueError(f"No history table for '{table_name}'")

    id_column, columns = HISTORY_TABLES[table_name]
    cur.execute(
        f"""
        INSERT INTO {table_name}_history
        ({id_column}, operation, changed_by, changed_at, {columns})
        SELECT {id_column}, %s, %s, (NOW() AT TIME ZONE 'UTC'), {columns}
        FROM {table_name} WHERE {id_column} = %s
    """,
        (operation, changed_by, record_id),
    )
