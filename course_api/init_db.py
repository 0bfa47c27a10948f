"""Create the database tables and print their names.

Usage:
    python -m course_api.init_db
"""
import sys

from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

from course_api.database import engine, ensure_schema


def main() -> None:
    try:
        ensure_schema()
        table_names = inspect(engine).get_table_names()
    except SQLAlchemyError as exc:
        print("Database initialization failed:", exc, file=sys.stderr)
        sys.exit(1)
    for table_name in sorted(table_names):
        print(table_name)


if __name__ == "__main__":
    main()
