"""
Core module for shared domain infrastructure.

This module contains:
- Domain events, exceptions and value objects
- Infrastructure abstractions (event bus, counter store)
- Middleware components
- Background tasks and health checks
"""
