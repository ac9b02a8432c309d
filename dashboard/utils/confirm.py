"""
Confirmation gate for destructive actions
"""


class ConfirmationDialog:
    """
    Holds the target of a pending destructive action until the user
    confirms or cancels it.

    Cancel discards the target without side effects. Confirm runs the
    callback on the target and then discards it, whether or not the
    callback raised.
    """

    def __init__(self, target=None):
        self.target = target

    @property
    def is_open(self):
        return self.target is not None

    def request(self, target):
        self.target = target

    def cancel(self):
        self.target = None

    def confirm(self, callback):
        if self.target is None:
            return None
        target = self.target
        try:
            return callback(target)
        finally:
            self.target = None


def session_dialog(session, key):
    """ConfirmationDialog seeded from the pending target stored in ``session``."""
    pending = session.get('pending_delete', {})
    return ConfirmationDialog(pending.get(key))


def store_dialog(session, key, dialog):
    """Write the dialog's pending target back to ``session``."""
    pending = dict(session.get('pending_delete', {}))
    if dialog.is_open:
        pending[key] = dialog.target
    else:
        pending.pop(key, None)
    session['pending_delete'] = pending
