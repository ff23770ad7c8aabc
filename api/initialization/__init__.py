"""
API Initialization Module.

This module contains all initialization logic split into focused modules:
- logging: Logger configuration
- services: Shared component construction (rate store, price oracle)
- shutdown: Graceful shutdown handler
"""

__all__ = []
