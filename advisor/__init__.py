"""
Advisor app.

Metered AI advisor for licensed devices: per-device daily quotas and the
completion provider boundary.
"""
