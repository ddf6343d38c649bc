"""myFlix movie catalog API - Backend.

A small REST API in front of a MongoDB database:
- Movies (with embedded genre / director metadata) are read-only over HTTP.
- Users register, log in with username/password and receive a JWT.
- Every other route requires `Authorization: Bearer <token>`.

See README for setup and usage.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
