import os
import sys
import atexit

# Add current directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from flask import Flask
from flask_migrate import Migrate
from models.database import db
from utils.timezone_utils import DEFAULT_TIMEZONE

# Crear instancia de la app Flask
app = Flask(__name__)

# Configuración general
app.config['SECRET_KEY'] = os.getenv('SECRET_KEY', 'dev-occupancy-secret')
app.config['ROLLOVER_TIMEZONE'] = os.getenv('ROLLOVER_TIMEZONE', DEFAULT_TIMEZONE)
app.config['ROLLOVER_SCHEDULER_ENABLED'] = os.getenv('ROLLOVER_SCHEDULER_ENABLED', '1') == '1'
app.logger.setLevel(os.getenv('LOG_LEVEL', 'INFO').upper())

# Configuración de la base de datos
uri = os.getenv("DATABASE_URL") or 'sqlite:///' + os.path.join(
    os.path.dirname(os.path.abspath(__file__)), 'occupancy.db'
)
# Normalizar si viniera como postgres://
uri = uri.replace("postgres://", "postgresql://")
app.config['SQLALCHEMY_DATABASE_URI'] = uri

# Configure SQLAlchemy engine options based on environment
is_production = os.getenv('DYNO') or os.getenv('RENDER')
if is_production:
    app.config['SQLALCHEMY_ENGINE_OPTIONS'] = {
        "pool_pre_ping": True,
        "pool_recycle": 300,
        "pool_size": 10,
        "max_overflow": 20,
        "pool_timeout": 30
    }
else:
    app.config['SQLALCHEMY_ENGINE_OPTIONS'] = {
        "pool_pre_ping": True,
        "pool_recycle": 300,
    }
app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

# Inicializar extensiones
db.init_app(app)
migrate = Migrate(app, db)

rollover_scheduler = None


@app.teardown_appcontext
def shutdown_session(exception=None):
    db.session.remove()


def init_db():
    """Create tables on local SQLite; other engines are provisioned by migrations."""
    with app.app_context():
        from models import models  # noqa: F401  (register tables)
        try:
            driver = db.engine.url.drivername
        except Exception as e:
            app.logger.warning(f"Could not inspect database driver: {e}")
            return

        if driver.startswith("sqlite"):
            db.create_all()


def init_scheduler():
    """Start the midnight occupancy rollover"""
    global rollover_scheduler
    if not app.config['ROLLOVER_SCHEDULER_ENABLED']:
        app.logger.info("Occupancy rollover scheduler disabled by configuration")
        return
    if rollover_scheduler is not None:
        return

    try:
        from tasks.scheduler import RolloverScheduler

        rollover_scheduler = RolloverScheduler(app)
        rollover_scheduler.start()
        app.logger.info(
            f"Scheduler initialized - occupancy rollover runs at local midnight "
            f"({app.config['ROLLOVER_TIMEZONE']})"
        )

        # Shut down the scheduler when exiting the app
        atexit.register(rollover_scheduler.shutdown)
    except Exception as e:
        rollover_scheduler = None
        app.logger.error(f"Failed to initialize scheduler: {e}")
        app.logger.warning("Automatic occupancy rollover disabled due to scheduler error")


if __name__ == '__main__':
    init_db()
    init_scheduler()
    port = int(os.getenv('PORT', 5000))
    # En producción usar debug=False; el reloader arrancaría dos schedulers
    app.run(host='0.0.0.0', port=port, debug=False)
else:
    # Cuando se ejecuta con gunicorn, inicializar la base de datos después de crear la app
    init_db()
    init_scheduler()
