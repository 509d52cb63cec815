"""
Database initialization script.
"""
from app.core.config import settings
from app.db.session import build_engine, init_db

if __name__ == "__main__":
    print("Initializing database...")
    init_db(build_engine(settings))
    print("Database initialized successfully!")
