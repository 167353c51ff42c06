"""
Authentication: bearer token verification and principal resolution.
"""
