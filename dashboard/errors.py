"""
Error types raised by the backend-facing layers of the dashboard
"""


class DashboardError(Exception):
    """Base class for all dashboard errors"""


class ConfigurationError(DashboardError):
    """Required configuration (e.g. Supabase credentials) is missing"""


class BackendError(DashboardError):
    """A call to the remote backend failed"""

    def __init__(self, message, table=None):
        super().__init__(message)
        self.table = table


class FetchError(BackendError):
    pass


class WriteError(BackendError):
    pass


class UploadError(BackendError):
    pass
