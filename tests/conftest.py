import io
import itertools
from types import SimpleNamespace

import pytest

from dashboard import create_app


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    """Just enough of the PostgREST query builder for the dashboard"""

    def __init__(self, backend, table):
        self.backend = backend
        self.table = table
        self.op = 'select'
        self.payload = None
        self.filters = []
        self.orders = []
        self.max_rows = None

    def select(self, columns='*'):
        self.op = 'select'
        return self

    def insert(self, rows):
        self.op = 'insert'
        self.payload = rows
        return self

    def update(self, fields):
        self.op = 'update'
        self.payload = fields
        return self

    def delete(self):
        self.op = 'delete'
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False, nullsfirst=False):
        self.orders.append((column, desc, nullsfirst))
        return self

    def limit(self, count):
        self.max_rows = count
        return self

    def _matches(self, row):
        return all(str(row.get(column)) == str(value) for column, value in self.filters)

    def execute(self):
        self.backend.calls.append((self.table, self.op, self.payload, list(self.filters)))
        error = self.backend.failures.get((self.table, self.op))
        if error is not None:
            raise error

        rows = self.backend.tables.setdefault(self.table, [])

        if self.op == 'select':
            result = [dict(row) for row in rows if self._matches(row)]
            for column, desc, nullsfirst in reversed(self.orders):
                present = [r for r in result if r.get(column) is not None]
                missing = [r for r in result if r.get(column) is None]
                present.sort(key=lambda r: r[column], reverse=desc)
                result = missing + present if nullsfirst else present + missing
            if self.max_rows is not None:
                result = result[:self.max_rows]
            return FakeResponse(result)

        if self.op == 'insert':
            created = []
            for fields in self.payload:
                row = dict(fields)
                row['id'] = next(self.backend.ids)
                row['created_at'] = f'2025-01-01T00:00:{row["id"]:02d}'
                rows.append(row)
                created.append(dict(row))
            return FakeResponse(created)

        if self.op == 'update':
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(dict(row))
            return FakeResponse(updated)

        if self.op == 'delete':
            removed = [dict(row) for row in rows if self._matches(row)]
            self.backend.tables[self.table] = [row for row in rows if not self._matches(row)]
            return FakeResponse(removed)

        raise AssertionError(f'unsupported operation {self.op}')


class FakeBucket:
    def __init__(self, backend, name):
        self.backend = backend
        self.name = name

    def upload(self, path, data, file_options=None):
        if self.backend.storage_error is not None:
            raise self.backend.storage_error
        content_type = (file_options or {}).get('content-type')
        self.backend.objects[(self.name, path)] = (data, content_type)
        return SimpleNamespace(path=path, full_path=f'{self.name}/{path}')

    def remove(self, paths):
        for path in paths:
            self.backend.objects.pop((self.name, path), None)
        return []


class FakeStorage:
    def __init__(self, backend):
        self.backend = backend

    def from_(self, bucket):
        return FakeBucket(self.backend, bucket)

    def list_buckets(self):
        return [SimpleNamespace(name='storage')]


class FakeChannel:
    def __init__(self, name):
        self.name = name
        self.bindings = []
        self.subscribed = False

    def on_postgres_changes(self, event, callback, table=None, schema='public'):
        self.bindings.append((event, callback, table, schema))
        return self

    def subscribe(self):
        self.subscribed = True
        return self


class FakeAuth:
    def __init__(self):
        self.users = {}

    def sign_in_with_password(self, credentials):
        user = self.users.get((credentials['email'], credentials['password']))
        if user is None:
            raise Exception('Invalid login credentials')
        return SimpleNamespace(user=user, session=None)

    def sign_out(self):
        return None


class FakeSupabase:
    """In-memory stand-in for the Supabase client: tables, storage, realtime, auth"""

    def __init__(self):
        self.tables = {}
        self.calls = []
        self.failures = {}
        self.ids = itertools.count(1)
        self.objects = {}
        self.storage_error = None
        self.storage = FakeStorage(self)
        # every channel ever opened, and the live ones by topic like the real client
        self.channels = []
        self.topics = {}
        self.removed_channels = []
        self.auth = FakeAuth()

    def table(self, name):
        return FakeQuery(self, name)

    def seed(self, table, *rows):
        created = []
        for fields in rows:
            row = dict(fields)
            row.setdefault('id', next(self.ids))
            row.setdefault('created_at', f'2025-01-01T00:00:{row["id"]:02d}')
            self.tables.setdefault(table, []).append(row)
            created.append(row)
        return created

    def fail(self, table, op, error=None):
        self.failures[(table, op)] = error or Exception(f'{op} on {table} failed')

    def calls_for(self, table, op):
        return [call for call in self.calls if call[0] == table and call[1] == op]

    # realtime

    def channel(self, name):
        channel = FakeChannel(name)
        self.channels.append(channel)
        self.topics[name] = channel
        return channel

    def remove_channel(self, channel):
        # removal goes by topic, whichever channel currently holds it
        stored = self.topics.pop(channel.name, None)
        if stored is not None:
            stored.subscribed = False
        self.removed_channels.append(channel)

    def push(self, table, event_type, new=None, old=None):
        payload = {'eventType': event_type, 'new': new or {}, 'old': old or {},
                   'schema': 'public', 'table': table}
        for channel in list(self.topics.values()):
            if not channel.subscribed:
                continue
            for event, callback, bound_table, schema in channel.bindings:
                if bound_table == table and event in ('*', event_type):
                    callback(payload)


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def app(fake_supabase):
    flask_app = create_app('testing', client=fake_supabase)
    yield flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_context(app):
    with app.app_context():
        yield app


def image_bytes(fmt='PNG'):
    from PIL import Image

    buffer = io.BytesIO()
    Image.new('RGB', (4, 4), (200, 30, 30)).save(buffer, format=fmt)
    return buffer.getvalue()
