from functools import wraps
from flask import abort, current_app, redirect, url_for, flash, request
from flask_login import current_user

from dashboard.entities import get_entity

def admin_required(f):
    """Decorator to require a signed-in administrator."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if current_app.config.get('LOGIN_DISABLED'):
            return f(*args, **kwargs)

        if not current_user.is_authenticated:
            flash('Please log in to access this page.', 'error')
            return redirect(url_for('auth.login', next=request.url))

        if not current_user.is_admin:
            flash('You do not have permission to access this page.', 'error')
            return redirect(url_for('auth.login'))

        return f(*args, **kwargs)
    return decorated_function

def entity_required(f):
    """Resolve the <entity> URL segment to an EntityType, 404 when unknown."""
    @wraps(f)
    def decorated_function(entity, *args, **kwargs):
        entity_type = get_entity(entity)
        if entity_type is None:
            abort(404)
        return f(entity_type, *args, **kwargs)
    return decorated_function
