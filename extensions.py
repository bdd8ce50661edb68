from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
migrate = Migrate()

# Storage and on/off switch come from RATELIMIT_* config keys at init_app time.
limiter = Limiter(get_remote_address)
