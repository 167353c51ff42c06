"""
Infrastructure layer: persistence, authentication and the web adapter.
"""
