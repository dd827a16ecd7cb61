from slowapi import Limiter
from slowapi.util import get_remote_address

from event_planner.core.config import settings

# Keyed by client address: the limited routes (register/login/forgot-password) are anonymous.
limiter = Limiter(key_func=get_remote_address, enabled=settings.ENABLE_RATE_LIMITING)
