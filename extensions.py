from flask_cors import CORS
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager

# Extensions are created unbound and attached in create_app()

# Database
db = SQLAlchemy()

# Request identity (bearer tokens, see security.py)
login_manager = LoginManager()

# The SPA is served from another origin
cors = CORS()
