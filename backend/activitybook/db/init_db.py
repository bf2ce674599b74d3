"""
Database initialization script.
"""
from activitybook.db.session import init_db, primary_keys

if __name__ == "__main__":
    print("Initializing database...")
    init_db()
    print(f"Database initialized successfully! Next activity key: {primary_keys.current()}")
