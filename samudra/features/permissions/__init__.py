"""
Permission management feature module.

A permission is an atomic grantable capability identified by a module and an
action, with a derived ``MODULE_ACTION`` code.
"""
