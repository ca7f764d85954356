# greenstride/__init__.py

from flask import Flask, jsonify
from flask_cors import CORS
from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager

from config import Config

db = SQLAlchemy()
jwt = JWTManager()


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Init extensions
    db.init_app(app)
    jwt.init_app(app)

    CORS(app, resources={r"/api/*": {"origins": "*"}})

    # -----------------------------
    # JWT: load the account on every protected request
    # -----------------------------
    from .models.user import User
    from .database import db_retry

    @jwt.user_lookup_loader
    @db_retry
    def load_user(_jwt_header, jwt_data):
        identity = jwt_data[app.config["JWT_IDENTITY_CLAIM"]]
        return User.query.filter_by(email=identity).one_or_none()

    @jwt.user_lookup_error_loader
    def user_lookup_error_callback(_jwt_header, jwt_data):
        return jsonify({"message": "Account not found or deactivated."}), 403

    @jwt.unauthorized_loader
    def unauthorized_callback(reason):
        return (
            jsonify(
                {
                    "message": "Access denied. No token provided.",
                    "error": reason,
                }
            ),
            401,
        )

    @jwt.invalid_token_loader
    def invalid_token_callback(reason):
        return jsonify({"message": "Invalid token.", "error": reason}), 403

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return jsonify({"message": "Token has expired"}), 403

    # -----------------------------
    # Error handlers
    # -----------------------------
    from .errors import register_error_handlers

    register_error_handlers(app)

    # -----------------------------
    # IMPORT BLUEPRINTS (all routes)
    # -----------------------------
    from .routes.auth_routes import auth_bp
    from .routes.profile_routes import profile_bp
    from .routes.activity_routes import activity_bp
    from .routes.carbon_routes import carbon_bp
    from .routes.social_routes import social_bp
    from .routes.badges_routes import badges_bp
    from .routes.settings_routes import settings_bp

    # -----------------------------
    # REGISTER BLUEPRINTS
    # -----------------------------
    app.register_blueprint(auth_bp, url_prefix="/api")
    app.register_blueprint(profile_bp, url_prefix="/api/profile")
    app.register_blueprint(activity_bp, url_prefix="/api/activity")
    app.register_blueprint(carbon_bp, url_prefix="/api")
    app.register_blueprint(social_bp, url_prefix="/api")
    app.register_blueprint(badges_bp, url_prefix="/api/user/badges")
    app.register_blueprint(settings_bp, url_prefix="/api/settings")

    @app.route("/api/health")
    def health():
        return {"status": "ok"}

    # -----------------------------
    # DB init + badge catalog
    # -----------------------------
    from .badges import seed_badges

    @app.cli.command("seed-badges")
    def seed_badges_command():
        """Insert any missing badge definitions."""
        added = seed_badges()
        print(f"Seeded {added} badge(s).")

    with app.app_context():
        db.create_all()
        seed_badges()

    return app
