"""
Use cases and adapters behind the ToGather pages.

``backend`` defines the collaborator contract; ``sql_backend`` is the
SQLAlchemy-backed implementation used by the running app.
"""
