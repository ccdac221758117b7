"""
Activations module - Device activation and slot management.

This module handles:
- Activation entity and domain logic
- Per-license device slot cap
- Device activation/deactivation
"""
