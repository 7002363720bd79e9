"""
Auth Module - users and HTTP Basic credential checks.
"""
