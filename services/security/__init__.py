"""
Security Services

Security event logging shared by the middleware and the request handlers.
"""

from .security_logger import security_log, SecurityLogger

__all__ = ["security_log", "SecurityLogger"]
