"""
FastAPI web adapter.
"""
