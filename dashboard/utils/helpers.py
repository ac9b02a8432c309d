from flask import flash

from dashboard.backend import backend
from dashboard.errors import FetchError
from dashboard.repository import Repository

def flash_errors(form):
    """Flash form validation errors."""
    for field, errors in form.errors.items():
        for error in errors:
            if isinstance(error, dict):
                # FieldList/FormField errors are nested per entry
                flash(f"{getattr(form, field).label.text}: invalid entry", 'error')
                continue
            flash(f"{getattr(form, field).label.text}: {error}", 'error')

def repository_for(entity):
    """Repository over the entity's table using the app's Supabase client."""
    return Repository(backend.client, entity.table, order=entity.order)

def dashboard_counts(entities):
    """Number of rows per entity; None where the listing failed."""
    counts = {}
    for entity in entities:
        try:
            counts[entity.key] = len(repository_for(entity).list())
        except FetchError:
            counts[entity.key] = None
    return counts
