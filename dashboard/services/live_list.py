"""
Entity list kept in sync with its table through realtime row changes.

On mount the list is fetched once and a postgres_changes subscription is
opened for the table. Each pushed change patches the in-memory records
directly (append on INSERT, replace-by-id on UPDATE, remove-by-id on DELETE)
without re-fetching. Every table uses the same row-change mechanism.

A change that arrives before the initial fetch finishes is overwritten by
that fetch.
"""
import logging
import threading
import uuid

from dashboard.errors import FetchError
from dashboard.realtime import CHANGE_EVENTS, normalize_change

logger = logging.getLogger(__name__)


def apply_change(records, event_type, new, old):
    """
    Return ``records`` patched with one row change.

    Every branch is keyed by id, so applying the same change twice gives
    the same result as applying it once.
    """
    if event_type == 'INSERT':
        if any(r.get('id') == new.get('id') for r in records):
            return [new if r.get('id') == new.get('id') else r for r in records]
        return records + [new]
    if event_type == 'UPDATE':
        return [new if r.get('id') == new.get('id') else r for r in records]
    if event_type == 'DELETE':
        return [r for r in records if r.get('id') != old.get('id')]
    return records


class LiveList:
    """Records of one entity table plus the realtime subscription feeding them"""

    def __init__(self, repository, realtime, entity, on_subscribe=None, on_unsubscribe=None):
        self.repository = repository
        self.realtime = realtime
        self.entity = entity
        self.records = []
        self.channel = None
        self.listeners = []
        self._on_subscribe = on_subscribe
        self._on_unsubscribe = on_unsubscribe
        self._lock = threading.Lock()
        # The realtime client keys channels by topic, so every viewer needs its own
        self._viewer = uuid.uuid4().hex[:12]

    @property
    def channel_name(self):
        return f'public:{self.entity.table}:{self._viewer}'

    def fetch(self):
        """Replace the records with a fresh listing; empty on failure."""
        try:
            records = self.repository.list()
        except FetchError as e:
            logger.error(f"Error fetching {self.entity.title.lower()}: {str(e)}")
            records = []
        with self._lock:
            self.records = records
        return self.records

    def mount(self):
        self.fetch()
        if self.channel is None:
            channel = self.realtime.channel(self.channel_name)
            channel.on_postgres_changes(
                '*', schema='public', table=self.entity.table, callback=self.apply
            )
            channel.subscribe()
            self.channel = channel
            if self._on_subscribe:
                self._on_subscribe(self)
        return self

    def unmount(self):
        if self.channel is None:
            return
        channel, self.channel = self.channel, None
        try:
            self.realtime.remove_channel(channel)
        except Exception as e:
            logger.error(f"Error removing channel {self.channel_name}: {str(e)}")
        if self._on_unsubscribe:
            self._on_unsubscribe(self)

    def apply(self, payload):
        """Realtime callback: patch the records from a postgres_changes payload."""
        event_type, new, old = normalize_change(payload)
        if event_type not in CHANGE_EVENTS:
            logger.debug(f"Ignoring realtime event {event_type} on {self.channel_name}")
            return
        with self._lock:
            self.records = apply_change(self.records, event_type, new, old)
            records = list(self.records)
        self._notify(event_type, records)

    def remove_local(self, record_id):
        """Drop a row this process has just deleted, ahead of its DELETE event."""
        with self._lock:
            remaining = [r for r in self.records if str(r.get('id')) != str(record_id)]
            if len(remaining) == len(self.records):
                return
            self.records = remaining
            records = list(remaining)
        self._notify('DELETE', records)

    def subscribe(self, listener):
        self.listeners.append(listener)

    def _notify(self, event_type, records):
        for listener in list(self.listeners):
            listener(event_type, records)
