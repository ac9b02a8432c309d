"""
Generic record repository over one Supabase table
"""
import logging
from collections import namedtuple

from dashboard.errors import FetchError, WriteError

logger = logging.getLogger(__name__)

# One ORDER BY term; applied in sequence so later terms break ties
OrderSpec = namedtuple('OrderSpec', ['column', 'desc', 'nulls_first'])
OrderSpec.__new__.__defaults__ = (False, False)


class Repository:
    """select / insert / update / delete against a single remote table"""

    def __init__(self, client, table, order=None):
        self.client = client
        self.table = table
        self.order = list(order or [])

    def _query(self):
        return self.client.table(self.table)

    def list(self, order=None):
        """
        Fetch every row of the table.

        Args:
            order: Optional list of OrderSpec overriding the repository default

        Returns:
            List of row dicts

        Raises:
            FetchError: if the remote select fails
        """
        try:
            query = self._query().select('*')
            for spec in (order if order is not None else self.order):
                query = query.order(spec.column, desc=spec.desc, nullsfirst=spec.nulls_first)
            response = query.execute()
            return response.data or []
        except Exception as e:
            logger.error(f"Error fetching {self.table}: {str(e)}")
            raise FetchError(f"Failed to fetch {self.table}", table=self.table) from e

    def get(self, record_id):
        try:
            response = self._query().select('*').eq('id', record_id).execute()
        except Exception as e:
            logger.error(f"Error fetching {self.table} id={record_id}: {str(e)}")
            raise FetchError(f"Failed to fetch {self.table} {record_id}", table=self.table) from e
        rows = response.data or []
        return rows[0] if rows else None

    def insert(self, fields):
        """Insert one row and return it as stored (with its new id)."""
        try:
            response = self._query().insert([fields]).execute()
        except Exception as e:
            logger.error(f"Error adding to {self.table}: {str(e)}")
            raise WriteError(f"Failed to insert into {self.table}", table=self.table) from e
        rows = response.data or []
        logger.info(f"Added row to {self.table}: id={rows[0].get('id') if rows else None}")
        return rows[0] if rows else None

    def update(self, record_id, fields):
        """Overwrite the given fields of one row; other columns are untouched."""
        try:
            response = self._query().update(fields).eq('id', record_id).execute()
        except Exception as e:
            logger.error(f"Error updating {self.table} id={record_id}: {str(e)}")
            raise WriteError(f"Failed to update {self.table} {record_id}", table=self.table) from e
        rows = response.data or []
        logger.info(f"Updated {self.table} id={record_id}")
        return rows[0] if rows else None

    def delete(self, record_id):
        try:
            self._query().delete().eq('id', record_id).execute()
        except Exception as e:
            logger.error(f"Error deleting {self.table} id={record_id}: {str(e)}")
            raise WriteError(f"Failed to delete {self.table} {record_id}", table=self.table) from e
        logger.info(f"Deleted {self.table} id={record_id}")
