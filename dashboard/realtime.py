"""
Realtime row-change subscriptions.

The Supabase realtime client is asyncio-only, while Flask views are
synchronous. ``RealtimeBridge`` runs an async Supabase client on its own
event loop in a daemon thread and exposes a small blocking API:

    bridge = RealtimeBridge(url, key)
    bridge.start()
    channel = bridge.channel('public:events:viewer-1')
    channel.on_postgres_changes('*', schema='public', table='events', callback=cb)
    channel.subscribe()
    ...
    bridge.remove_channel(channel)

Callbacks run on the bridge thread.
"""
import asyncio
import concurrent.futures
import logging
import threading

from supabase import acreate_client

logger = logging.getLogger(__name__)

CHANGE_EVENTS = ('INSERT', 'UPDATE', 'DELETE')


def normalize_change(payload):
    """
    Reduce a postgres_changes payload to ``(event_type, new, old)``.

    Realtime servers have delivered two payload shapes over time: the flat
    ``{"eventType", "new", "old"}`` form and the nested
    ``{"data": {"type", "record", "old_record"}}`` form. Both are accepted.
    """
    if not isinstance(payload, dict):
        return None, {}, {}

    if 'eventType' in payload:
        return payload.get('eventType'), payload.get('new') or {}, payload.get('old') or {}

    data = payload.get('data') or {}
    return data.get('type'), data.get('record') or {}, data.get('old_record') or {}


class BridgedChannel:
    """Blocking handle for a channel living on the bridge loop"""

    def __init__(self, bridge, name):
        self.bridge = bridge
        self.name = name
        self._bindings = []
        self._channel = None

    def on_postgres_changes(self, event, callback, table=None, schema='public'):
        self._bindings.append((event, callback, table, schema))
        return self

    def subscribe(self):
        self._channel = self.bridge.call(self._subscribe())
        logger.info(f"Subscribed to realtime channel {self.name}")
        return self

    async def _subscribe(self):
        client = await self.bridge.async_client()
        channel = client.channel(self.name)
        for event, callback, table, schema in self._bindings:
            channel.on_postgres_changes(event, callback=callback, table=table, schema=schema)
        try:
            await channel.subscribe()
        except asyncio.CancelledError:
            await client.remove_channel(channel)
            raise
        return channel


class RealtimeBridge:
    """Async Supabase client driven from a background event loop"""

    def __init__(self, url, key, timeout=10):
        self.url = url
        self.key = key
        self.timeout = timeout
        self.loop = None
        self.thread = None
        self._client = None

    def start(self):
        if self.thread is None or not self.thread.is_alive():
            self.loop = asyncio.new_event_loop()
            self.thread = threading.Thread(target=self._run_wrapper, daemon=True)
            self.thread.start()

    def _run_wrapper(self):
        asyncio.set_event_loop(self.loop)
        try:
            self.loop.run_forever()
        finally:
            self.loop.close()

    def stop(self):
        if self.thread and self.thread.is_alive():
            self.loop.call_soon_threadsafe(self.loop.stop)
            self.thread.join(timeout=1)
        self._client = None

    def call(self, coro):
        future = asyncio.run_coroutine_threadsafe(coro, self.loop)
        try:
            return future.result(timeout=self.timeout)
        except concurrent.futures.TimeoutError:
            # stop the coroutine so a late join cannot leave an untracked channel
            future.cancel()
            raise

    async def async_client(self):
        if self._client is None:
            self._client = await acreate_client(self.url, self.key)
        return self._client

    def channel(self, name):
        return BridgedChannel(self, name)

    def remove_channel(self, channel):
        if getattr(channel, '_channel', None) is None:
            return
        self.call(self._remove(channel._channel))
        channel._channel = None
        logger.info(f"Removed realtime channel {channel.name}")

    async def _remove(self, channel):
        client = await self.async_client()
        await client.remove_channel(channel)
