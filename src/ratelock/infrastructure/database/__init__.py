"""SQLAlchemy Core schema and engine setup."""
