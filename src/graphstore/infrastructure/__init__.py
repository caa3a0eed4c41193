"""Infrastructure layer — relational engine, repositories, and graph bridges.

This layer depends on stdlib and third-party libs (SQLAlchemy, NetworkX)
plus the domain layer. The GraphStore in :mod:`.store` is the only module
callers need; everything else is an implementation detail.
"""
