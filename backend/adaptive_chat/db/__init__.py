"""Database layer: declarative base, models and async sessions."""
