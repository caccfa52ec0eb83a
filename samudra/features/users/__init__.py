"""
Caller identity: bearer-token verification and permission-code guards.
"""
