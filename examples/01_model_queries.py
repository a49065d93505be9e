"""
Example 01: Model Queries

This example demonstrates binding queries to models, finding models by
identifier and falling back to plain rows for tables without a model.
"""

from dataclasses import dataclass
import tempfile
import sqlite3
from pathlib import Path

from model_query import ConnectionConfig, Database, Model


@dataclass
class User(Model):
    """User model"""
    __table__ = "users"

    id: int
    name: str
    email: str


def main():
    # Set up database
    db_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    db_path = db_file.name
    db_file.close()

    conn = sqlite3.connect(db_path)
    conn.execute("CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT NOT NULL, email TEXT NOT NULL)")
    conn.execute("INSERT INTO users (name, email) VALUES ('Alice', 'alice@example.com')")
    conn.execute("INSERT INTO users (name, email) VALUES ('Bob', 'bob@example.com')")
    conn.commit()
    conn.close()

    database = Database.from_config(ConnectionConfig(driver="sqlite", database=db_path))

    print("=== Model Queries ===\n")

    print("1. Find by identifier:")
    user = database.model(User).find(1)
    print(f"   {user}\n")

    print("2. Find several (order is not guaranteed):")
    for u in database.model(User).find([1, 2, 3]):
        print(f"   - {u.name}")
    print()

    print("3. Filter and fetch:")
    users = database.model(User).where("email", "LIKE", "b%").get()
    print(f"   {users}\n")

    print("4. Plain rows without a model:")
    print(f"   {database.table('users').order_by('name', 'desc').first()}\n")

    database.close()
    Path(db_path).unlink()


if __name__ == "__main__":
    main()
