"""
Domain layer for the time tracker.
Entities, repository ports and services with no infrastructure dependencies.
"""
