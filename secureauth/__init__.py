"""
SecureAuth - short-lived bearer credentials untuk username/password login flow.

Package ini menyediakan pipeline autentikasi inti:
- Password hashing dan verifikasi (bcrypt)
- JWT issuance dan verification
- Register, login, dan profile workflows
- Fixed-window rate limiting untuk public endpoints

Built with FastAPI, SQLAlchemy, dan passlib.
"""

__version__ = "1.0.0"
__author__ = "SecureAuth Team"
__license__ = "MIT"

# Package metadata
__all__ = [
    "__version__",
    "__author__",
    "__license__",
]
