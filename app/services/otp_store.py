"""Short-lived one-time code storage.

Backends share one interface: ``put(key, value, ttl)`` and
``take_if_valid(key, value)``. The Redis backend is the default so codes
survive restarts and work across several app instances; the memory backend
is for development and tests (OTP_STORE=memory).
"""
import time

from redis import Redis

MISSING = 'missing'
MISMATCH = 'mismatch'
OK = 'ok'


class MemoryOTPStore:
    def __init__(self, clock=time.time):
        self._items = {}
        self._clock = clock

    def put(self, key, value, ttl):
        self._items[key] = (value, self._clock() + ttl)

    def take_if_valid(self, key, value):
        item = self._items.get(key)
        if item is None:
            return MISSING
        stored, expires_at = item
        if self._clock() > expires_at:
            self._items.pop(key, None)
            return MISSING
        if stored != value:
            return MISMATCH
        self._items.pop(key, None)
        return OK


class RedisOTPStore:
    prefix = 'otp:'

    def __init__(self, redis_conn):
        self.redis = redis_conn

    def put(self, key, value, ttl):
        self.redis.set(self.prefix + key, value, ex=int(ttl))

    def take_if_valid(self, key, value):
        stored = self.redis.get(self.prefix + key)
        if stored is None:
            return MISSING
        if isinstance(stored, bytes):
            stored = stored.decode('utf-8')
        if stored != value:
            return MISMATCH
        self.redis.delete(self.prefix + key)
        return OK


def init_otp_store(app):
    backend = (app.config.get('OTP_STORE') or 'redis').lower()
    if backend == 'memory':
        store = MemoryOTPStore()
    else:
        store = RedisOTPStore(Redis.from_url(app.config.get('REDIS_URL')))
    app.extensions['otp_store'] = store
    return store


def get_otp_store(app):
    return app.extensions['otp_store']
