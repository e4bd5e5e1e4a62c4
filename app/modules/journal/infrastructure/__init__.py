"""
Journal infrastructure layer: SQLAlchemy persistence for journal entries.
"""
