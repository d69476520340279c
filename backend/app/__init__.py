from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=flask_app.config.get('CORS_ORIGINS', '*'))

    # Import and register blueprints here
    from app.main import main
    flask_app.register_blueprint(main)

    from app.api.games import games
    # Mount game routes under /api to match the admin panel and spectator pages
    flask_app.register_blueprint(games, url_prefix='/api/games')

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database with a demo game."""
        from app.services.games.session import GameSession
        from app.services.games.state import Player, Team
        from app.services.games.sync import SyncGateway
        with flask_app.app_context():
            import app.models  # noqa: F401
            db.drop_all()
            db.create_all()

            def demo_team(name, prefix):
                players = [Player(id=f'{prefix}{n}', name=f'{name} #{n}', number=str(n)) for n in range(1, 10)]
                return Team(name=name, players=players, batting_order=[p.id for p in players])

            gateway = SyncGateway(flask_app.config.get('POLL_INTERVAL_SEC', 5))
            session = GameSession.start('demo123', demo_team('Home', 'h'), demo_team('Away', 'a'), 9, gateway)
            session.close()
            print('Database has been reset and seeded with game demo123!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
