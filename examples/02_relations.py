"""
Example 02: Relation Criteria

This example demonstrates filtering models by their relations: related to a
given model, related to anything, related to models matching a sub-filter,
and the negated forms.
"""

from dataclasses import dataclass
from typing import Optional
import tempfile
import sqlite3
from pathlib import Path

from model_query import BelongsTo, ConnectionConfig, Database, HasMany, Model


@dataclass
class Author(Model):
    """Author model"""
    __table__ = "authors"
    __relations__ = {"books": HasMany("Book", "author_id")}

    id: int
    name: str


@dataclass
class Book(Model):
    """Book model"""
    __table__ = "books"
    __relations__ = {"author": BelongsTo(Author, "author_id")}

    id: int
    title: str
    author_id: Optional[int]


def main():
    db_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    db_path = db_file.name
    db_file.close()

    conn = sqlite3.connect(db_path)
    conn.executescript("""
        CREATE TABLE authors (id INTEGER PRIMARY KEY, name TEXT NOT NULL);
        CREATE TABLE books (id INTEGER PRIMARY KEY, title TEXT NOT NULL, author_id INTEGER);
        INSERT INTO authors (id, name) VALUES (1, 'Alice'), (2, 'Bob'), (3, 'Carol');
        INSERT INTO books (id, title, author_id) VALUES
            (1, 'Alpha', 1), (2, 'Beta', 1), (3, 'Gamma', 2), (4, 'Anonymous', NULL);
    """)
    conn.close()

    database = Database.from_config(ConnectionConfig(driver="sqlite", database=db_path))
    alice = database.model(Author).find(1)

    print("=== Relation Criteria ===\n")

    print("1. Books by Alice:")
    for book in database.model(Book).where_relation("author", alice).get():
        print(f"   - {book.title}")
    print()

    print("2. Books without an author:")
    for book in database.model(Book).where_no_relation("author").get():
        print(f"   - {book.title}")
    print()

    print("3. Authors with a book starting with G:")
    query = database.model(Author).where_relation("books", lambda q: q.where("title", "LIKE", "G%"))
    for author in query.get():
        print(f"   - {author.name}")
    print()

    print("4. Authors without books, or named Alice:")
    query = database.model(Author).where_no_relation("books").or_where("name", "Alice")
    for author in query.get():
        print(f"   - {author.name}")
    print()

    database.close()
    Path(db_path).unlink()


if __name__ == "__main__":
    main()
