import json
import os
import sys
import click
from dotenv import load_dotenv

# Load environment variables from .env
load_dotenv()

# Add project directory to Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from dashboard import create_app
from dashboard.backend import backend
from dashboard.entities import ENTITIES
from dashboard.errors import BackendError
from dashboard.utils.helpers import repository_for

# ===========================
# Create Flask app
# ===========================
flask_app = create_app()

# Gunicorn requires a callable named 'app'
app = flask_app

# ===========================
# Shell context (optional)
# ===========================
@flask_app.shell_context_processor
def make_shell_context():
    return {
        'backend': backend,
        'entities': ENTITIES,
        'repository_for': repository_for,
    }

# ===========================
# CLI commands
# ===========================

@flask_app.cli.command('check-connection')
def check_connection():
    """Verify Supabase storage and every content table are reachable."""
    client = backend.client
    bucket_name = flask_app.config.get('SUPABASE_STORAGE_BUCKET')
    ok = True

    try:
        buckets = client.storage.list_buckets()
        names = [b.name for b in buckets]
        click.echo(f"✅ Supabase Storage reachable, buckets: {names}")
        if bucket_name not in names:
            ok = False
            click.echo(f"⚠️ Bucket '{bucket_name}' not found. Create it as a public bucket.")
    except Exception as e:
        ok = False
        click.echo(f"❌ Supabase Storage error: {str(e)}")

    for entity in ENTITIES.values():
        try:
            client.table(entity.table).select('id').limit(1).execute()
            click.echo(f"✅ Table '{entity.table}' reachable")
        except Exception as e:
            ok = False
            click.echo(f"❌ Table '{entity.table}' error: {str(e)}")

    if not ok:
        sys.exit(1)

@flask_app.cli.command('list-records')
@click.argument('entity', type=click.Choice(sorted(ENTITIES)))
def list_records(entity):
    """Print the ordered listing of one content type as JSON lines."""
    try:
        records = repository_for(ENTITIES[entity]).list()
    except BackendError as e:
        click.echo(f"❌ {str(e)}", err=True)
        sys.exit(1)

    for record in records:
        click.echo(json.dumps(record, default=str))

# ===========================
# Local development server
# ===========================
if __name__ == "__main__":
    flask_app.run(debug=True)
