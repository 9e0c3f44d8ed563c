# ===============================================================================
# API THROTTLING CLASSES 🚦
# ===============================================================================

from rest_framework.throttling import UserRateThrottle


class StandardAPIThrottle(UserRateThrottle):
    """Standard rate limiting for dashboard API endpoints"""
    rate = "1000/hour"


class RenewalAPIThrottle(UserRateThrottle):
    """Manual renewals touch external panels and credits"""
    rate = "30/min"
