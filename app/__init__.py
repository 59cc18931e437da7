from flask import Flask, jsonify
from flask_migrate import Migrate
from .extensions import db, login_manager, rq
from .errors import register_error_handlers
from .services.otp_store import init_otp_store

migrate = Migrate()


def create_app(config_object='config.Config'):
    """App factory.

    Tests pass their own config object (in-memory SQLite, sync jobs,
    memory OTP store).
    """
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    rq.init_app(app)
    init_otp_store(app)
    register_error_handlers(app)

    @login_manager.user_loader
    def load_user(user_id):
        from .models.user import User
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({"error": "Unauthorized"}), 401

    from .blueprints.auth import bp as auth_bp
    app.register_blueprint(auth_bp, url_prefix="/auth")

    from .blueprints.applicant import bp as applicant_bp
    app.register_blueprint(applicant_bp, url_prefix="/apply")

    from .blueprints.admin import bp as admin_bp
    app.register_blueprint(admin_bp, url_prefix="/admin")

    from .api.otp import bp as otp_bp
    from .api.stages import bp as stages_bp
    from .api.evaluate import bp as evaluate_bp
    from .api.messages import bp as messages_bp
    for bp in (otp_bp, stages_bp, evaluate_bp, messages_bp):
        app.register_blueprint(bp)

    @app.get('/')
    def index():
        from .services.stages import active_stage
        return jsonify({"status": "ok", "active_stage": active_stage()})

    return app
