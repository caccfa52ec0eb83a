"""
Role management feature module.

A role is a named, ordered bundle of permissions assignable to users.
"""
