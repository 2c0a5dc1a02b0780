"""Relational store: engine/session helpers, ORM models and repositories."""
