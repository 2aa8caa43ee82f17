"""
Application wiring: configuration, database, models and dependencies
"""
