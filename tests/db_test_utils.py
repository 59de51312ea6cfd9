"""Shared database test utilities."""

import sqlite3


def execute_query(db_url: str, query: str, params: tuple = ()) -> list[tuple]:
    """Execute a query and return results for any database type."""
    if db_url.startswith("sqlite"):
        # Extract path from sqlite:///path
        db_path = db_url.replace("sqlite:///", "")
        conn = sqlite3.connect(db_path)
        cursor = conn.cursor()
        # Replace %s with ? for SQLite
        sqlite_query = query.replace("%s", "?")
        cursor.execute(sqlite_query, params)
        results = cursor.fetchall()
        cursor.close()
        conn.close()
        return results
    else:
        import psycopg

        with psycopg.connect(db_url) as conn, conn.cursor() as cur:
            cur.execute(query, params)
            return cur.fetchall()


def execute_statements(db_url: str, statements: list[tuple[str, tuple]]) -> None:
    """Execute statements in one transaction for any database type."""
    if db_url.startswith("sqlite"):
        db_path = db_url.replace("sqlite:///", "")
        conn = sqlite3.connect(db_path)
        try:
            for query, params in statements:
                conn.execute(query.replace("%s", "?"), params)
            conn.commit()
        finally:
            conn.close()
    else:
        import psycopg

        with psycopg.connect(db_url) as conn, conn.cursor() as cur:
            for query, params in statements:
                cur.execute(query, params)


def create_orders_table(db_url: str) -> None:
    """Create and fill an ``orders`` table with three rows."""
    rows = [
        (1, "Alice", 19.99, "2024-01-15"),
        (2, "Bob", 5.5, "2024-02-20"),
        (3, "Carol", None, "2024-03-01"),
    ]
    statements = [
        (
            "CREATE TABLE orders (order_id INTEGER, customer TEXT, total REAL, ordered_on DATE)",
            (),
        )
    ]
    statements += [
        ("INSERT INTO orders VALUES (%s, %s, %s, %s)", row) for row in rows
    ]
    execute_statements(db_url, statements)
