"""
Application-owned Supabase handles.

One ``Backend`` extension is created at import time and bound to each app in
``create_app``. Every component that talks to Supabase receives the client
from here instead of building its own.
"""
import atexit
import logging
import weakref

from flask import current_app
from supabase import create_client, Client

from dashboard.errors import ConfigurationError
from dashboard.realtime import RealtimeBridge

logger = logging.getLogger(__name__)


class _State:
    def __init__(self, client=None, realtime=None):
        self.client = client
        self.realtime = realtime
        # mounted LiveList objects, one per open list stream
        self.live_lists = []


class Backend:
    """Flask extension holding the Supabase client and realtime bridge"""

    def __init__(self, app=None, client=None, realtime=None):
        self._apps = weakref.WeakSet()
        atexit.register(self.close_all)
        if app is not None:
            self.init_app(app, client=client, realtime=realtime)

    def init_app(self, app, client=None, realtime=None):
        app.extensions['backend'] = _State(client=client, realtime=realtime)
        self._apps.add(app)

    def _state(self, app=None):
        app = app or current_app
        return app.extensions['backend']

    @property
    def client(self) -> Client:
        state = self._state()
        if state.client is None:
            url = current_app.config.get('SUPABASE_URL')
            key = current_app.config.get('SUPABASE_KEY')
            if not url or not key:
                raise ConfigurationError("Supabase credentials not configured")
            state.client = create_client(url, key)
            current_app.logger.info(f"Supabase client created for {url}")
        return state.client

    @property
    def realtime(self):
        state = self._state()
        if state.realtime is None:
            url = current_app.config.get('SUPABASE_URL')
            key = current_app.config.get('SUPABASE_KEY')
            if not url or not key:
                raise ConfigurationError("Supabase credentials not configured")
            state.realtime = RealtimeBridge(url, key)
            state.realtime.start()
        return state.realtime

    def track(self, live):
        self._state().live_lists.append(live)

    def release(self, live):
        live_lists = self._state().live_lists
        if live in live_lists:
            live_lists.remove(live)

    def remove_local(self, table, record_id):
        """Drop a deleted row from every open list of ``table``."""
        for live in list(self._state().live_lists):
            if live.entity.table == table:
                live.remove_local(record_id)

    def close(self, app):
        """Unmount every open list, stop the realtime bridge and drop the client."""
        state = app.extensions.get('backend')
        if state is None:
            return
        with app.app_context():
            for live in list(state.live_lists):
                live.unmount()
        state.live_lists = []
        if isinstance(state.realtime, RealtimeBridge):
            state.realtime.stop()
        state.realtime = None
        state.client = None

    def close_all(self):
        for app in list(self._apps):
            self.close(app)


backend = Backend()
