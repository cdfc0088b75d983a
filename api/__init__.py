"""Multi-database users CRUD API (MongoDB, MySQL, SQLite)."""
