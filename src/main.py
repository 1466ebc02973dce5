import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from flask import Flask, jsonify
from flask_cors import CORS
from sqlalchemy.exc import SQLAlchemyError
from src.config import Config
from src.extensions import db, migrate
from src.logger import get_logger, set_level
from user.exceptions import (
    InsufficientStockException,
    InvalidTokenException,
    MalformedRecordException,
    ResourceNotFoundException,
    ValidationException,
)

# register blueprints
from routes import register_routes

logger = get_logger("StockDash.App")


def register_error_handlers(app):
    def _error(status):
        def handler(e):
            return jsonify({"error": str(e)}), status
        return handler

    app.register_error_handler(ValidationException, _error(400))
    app.register_error_handler(InvalidTokenException, _error(401))
    app.register_error_handler(ResourceNotFoundException, _error(404))
    app.register_error_handler(InsufficientStockException, _error(409))
    app.register_error_handler(MalformedRecordException, _error(422))

    def _database_error(e):
        db.session.rollback()
        logger.error("Database error: %s", e)
        return jsonify({"error": "Database error, please try again"}), 500

    app.register_error_handler(SQLAlchemyError, _database_error)


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Enable CORS for all routes
    CORS(app, origins=app.config["CORS_ORIGINS"], methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"], allow_headers=["Content-Type", "Authorization"])

    # initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import all models within app context so metadata is complete
    with app.app_context():
        import models  # noqa: F401

    register_routes(app)
    register_error_handlers(app)
    set_level(app.config.get("LOG_LEVEL", "INFO"))

    @app.get("/")
    def index():
        return jsonify({"message": "StockDash Inventory API"}), 200

    @app.get("/health")
    def health():
        return jsonify({"status": "ok"}), 200

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=app.config["DEBUG"])
