from slowapi import Limiter

from samudra.features.users.dependencies import get_authorization_header

limiter = Limiter(key_func=get_authorization_header)
