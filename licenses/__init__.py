"""
Licenses module - License entitlements and their lifecycle.

This module handles:
- License entity and tier feature limits
- License key generation
- License validation and expiry rules
- Administrative license queries and revocation
"""
