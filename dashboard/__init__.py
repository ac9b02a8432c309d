from flask import Flask, render_template, request, jsonify, redirect, url_for
from flask_login import LoginManager
from flask_wtf.csrf import CSRFProtect
import logging
import os

# Initialize extensions
login_manager = LoginManager()
csrf = CSRFProtect()

def create_app(config_name=None, client=None, realtime=None):
    """
    Build the dashboard application.

    Args:
        config_name: Key into config.config; defaults to FLASK_CONFIG or 'default'
        client: Supabase client to use instead of creating one from the config
        realtime: Realtime channel source; defaults to ``client`` when one is given
    """
    flask_app = Flask(__name__)

    from config import config as app_configs
    config_name = config_name or os.environ.get('FLASK_CONFIG', 'default')
    flask_app.config.from_object(app_configs[config_name])

    flask_app.logger.setLevel(getattr(logging, str(flask_app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))

    # Initialize extensions with flask_app
    from dashboard.backend import backend
    backend.init_app(flask_app, client=client, realtime=realtime if realtime is not None else client)
    login_manager.init_app(flask_app)
    csrf.init_app(flask_app)

    # Configure login manager
    login_manager.login_view = 'auth.login'
    login_manager.login_message = 'Please log in to access this page.'
    login_manager.login_message_category = 'info'

    import dashboard.models

    # Register Blueprints
    from dashboard.routes.auth_routes import auth_bp
    from dashboard.routes.admin_routes import admin_bp
    from dashboard.routes.api_routes import api_bp
    from dashboard.utils.template_filters import template_filters

    flask_app.register_blueprint(auth_bp)
    flask_app.register_blueprint(admin_bp)
    flask_app.register_blueprint(api_bp)
    flask_app.register_blueprint(template_filters)

    @flask_app.context_processor
    def inject_entities():
        from dashboard.entities import ENTITIES
        return {'nav_entities': ENTITIES.values()}

    @flask_app.route('/')
    def index():
        return redirect(url_for('admin.dashboard'))

    # Error handlers
    @flask_app.errorhandler(404)
    def not_found_error(error):
        if request.path.startswith('/api/'):
            return jsonify({'error': 'Not found'}), 404
        return render_template('errors/404.html'), 404

    @flask_app.errorhandler(500)
    def internal_error(error):
        flask_app.logger.error(f"Internal server error on {request.path}: {error}")
        if request.path.startswith('/api/'):
            return jsonify({'error': 'Internal server error'}), 500
        return render_template('errors/500.html'), 500

    return flask_app
