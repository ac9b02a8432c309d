import os
from dotenv import load_dotenv

# Values from a local .env file override nothing already exported
load_dotenv()

class Config:
    # Sessions and CSRF tokens
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dashboard-dev-secret'

    # Largest accepted request body (image uploads included)
    MAX_CONTENT_LENGTH = int(os.environ.get('MAX_CONTENT_LENGTH', 16 * 1024 * 1024))

    # Admin session lifetime in seconds
    PERMANENT_SESSION_LIFETIME = int(os.environ.get('PERMANENT_SESSION_LIFETIME', 7200))

    WTF_CSRF_TIME_LIMIT = None
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Supabase project, tables and storage
    SUPABASE_URL = os.environ.get('SUPABASE_URL')
    SUPABASE_KEY = os.environ.get('SUPABASE_KEY')
    SUPABASE_STORAGE_BUCKET = os.environ.get('SUPABASE_STORAGE_BUCKET', 'storage')
    # Public base used to build image URLs; not validated
    SUPABASE_STORAGE_URL = os.environ.get('SUPABASE_STORAGE_URL') or os.environ.get('SUPABASE_URL')

    # Remove the uploaded image again when the row write that follows it fails
    CLEANUP_ORPHANED_UPLOADS = os.environ.get('CLEANUP_ORPHANED_UPLOADS', 'True').lower() == 'true'

    # Seconds between keep-alive comments on the realtime list stream
    STREAM_HEARTBEAT = int(os.environ.get('STREAM_HEARTBEAT', 15))

class DevelopmentConfig(Config):
    DEBUG = True

class ProductionConfig(Config):
    DEBUG = False

class TestingConfig(Config):
    TESTING = True
    WTF_CSRF_ENABLED = False
    LOGIN_DISABLED = True
    SUPABASE_URL = 'https://example.supabase.co'
    SUPABASE_KEY = 'test-key'
    SUPABASE_STORAGE_URL = 'https://example.supabase.co'
    STREAM_HEARTBEAT = 1

config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
