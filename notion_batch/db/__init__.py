from notion_batch.db.database import build_table, create_db_engine, session_scope
from notion_batch.db.writer import SqlAlchemyItemWriter

__all__ = ["SqlAlchemyItemWriter", "build_table", "create_db_engine", "session_scope"]
