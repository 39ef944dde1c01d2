from slowapi import Limiter
from slowapi.util import get_remote_address

from .config import rate_limit

limiter = Limiter(key_func=get_remote_address)
PUBLIC_RATE_LIMIT = rate_limit()
