"""
Samudra Paket ERP - role and permission service.
"""
