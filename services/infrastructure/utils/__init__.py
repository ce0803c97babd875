"""Infrastructure utilities module.

Contains utility modules for:
- Logging configuration
- Cancellation tokens and deadlines for outbound calls
"""
