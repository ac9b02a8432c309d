from flask import Blueprint, render_template, redirect, url_for, flash, request, session, current_app
from flask_login import login_user, logout_user, current_user
from dashboard.backend import backend
from dashboard.forms import LoginForm
from dashboard.models import AdminUser

auth_bp = Blueprint('auth', __name__, url_prefix='/auth')

def _safe_next(next_page):
    # Only allow redirects within this site
    if next_page and next_page.startswith('/') and not next_page.startswith('//'):
        return next_page
    return None

@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    if current_user.is_authenticated:
        return redirect(url_for('admin.dashboard'))

    form = LoginForm()

    if form.validate_on_submit():
        email = form.email.data.strip().lower()
        password = form.password.data

        current_app.logger.info(f"Login attempt for {email}")

        try:
            response = backend.client.auth.sign_in_with_password({'email': email, 'password': password})
            user = response.user
        except Exception as e:
            current_app.logger.error(f"Login failed for {email}: {str(e)}")
            user = None

        if user is None:
            flash('Invalid email or password. Please try again.', 'error')
            return render_template('login.html', form=form)

        admin = AdminUser(user.id, user.email)
        session['admin_user'] = admin.to_session()
        login_user(admin, remember=form.remember.data)
        current_app.logger.info(f"Login successful for {admin.email}")
        flash('Welcome back!', 'success')

        next_page = _safe_next(request.args.get('next'))
        return redirect(next_page) if next_page else redirect(url_for('admin.dashboard'))

    return render_template('login.html', form=form)

@auth_bp.route('/logout', methods=['POST'])
def logout():
    try:
        backend.client.auth.sign_out()
    except Exception as e:
        current_app.logger.error(f"Error signing out of Supabase: {str(e)}")
    logout_user()
    session.pop('admin_user', None)
    session.pop('pending_delete', None)
    flash('You have been logged out successfully.', 'info')
    return redirect(url_for('auth.login'))
