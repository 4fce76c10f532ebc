"""Conversation feature package: entities, repositories, service, controller, router.

Conversations and their append-only message logs are stored through the
SQLAlchemy async ORM. Messages are only written by the tutor exchange.
"""
