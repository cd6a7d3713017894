"""
API module untuk SecureAuth API.
"""
