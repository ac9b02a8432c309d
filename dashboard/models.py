from flask import session
from flask_login import UserMixin
from dashboard import login_manager

# Every account that can sign in to the Supabase project is an administrator;
# there are no finer-grained roles.

@login_manager.user_loader
def load_user(user_id):
    admin = session.get('admin_user')
    if admin and admin.get('id') == user_id:
        return AdminUser(admin['id'], admin.get('email'))
    return None

class AdminUser(UserMixin):
    is_admin = True

    def __init__(self, user_id, email):
        self.id = str(user_id)
        self.email = email

    def to_session(self):
        return {'id': self.id, 'email': self.email}

    def __repr__(self):
        return f'<AdminUser {self.email}>'
