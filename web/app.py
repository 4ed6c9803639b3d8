"""
Lektor Web Frontend

Flask application serving the tutor page and its JSON API. The server owns
one TutorSession, so it behaves like the single-window desktop app: one
request in flight, one current result, one chat.

Usage:
    python web/app.py
    python web/app.py --port 1337 --host 127.0.0.1
"""

import sys
import uuid
from dataclasses import dataclass
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from flask import Flask
from web.config import Config

from infra.config import get_config
from infra.logger import TutorLogger, create_logger
from infra.storage import HistoryStore
from tutor.model import TutorModel
from tutor.session import TutorSession


@dataclass
class WebState:
    session: TutorSession
    history: HistoryStore
    logger: TutorLogger
    page_size: int = 20


def get_state(app) -> WebState:
    return app.extensions['lektor']


def create_app(
    session: TutorSession = None,
    history: HistoryStore = None,
    page_size: int = None,
    storage_root: Path = None,
):
    """Create and configure Flask app."""
    app = Flask(__name__)
    app.config.from_object(Config)
    storage_root = Path(storage_root) if storage_root else Config.STORAGE_ROOT

    logger = create_logger(
        uuid.uuid4().hex[:8],
        'web',
        log_dir=storage_root / 'logs',
    )

    if history is None:
        history = HistoryStore(storage_root, logger=logger.child('history'))
    if session is None:
        session = TutorSession(
            TutorModel.from_config(logger=logger.child('model')),
            history=history,
            logger=logger.child('session'),
        )

    app.extensions['lektor'] = WebState(
        session=session,
        history=history,
        logger=logger,
        page_size=page_size or get_config().defaults.history_page_size,
    )

    # Register route blueprints
    from web.routes.tutor_routes import tutor_bp
    from web.routes.history_routes import history_bp

    app.register_blueprint(tutor_bp)
    app.register_blueprint(history_bp)

    return app


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Lektor Web Frontend")
    parser.add_argument("--port", type=int, default=Config.PORT)
    parser.add_argument("--host", default=Config.HOST)
    parser.add_argument("--debug", action="store_true", default=Config.DEBUG)
    args = parser.parse_args()

    app = create_app()

    print(f"\n🚀 Lektor Web starting on http://{args.host}:{args.port}")
    print(f"📁 Storage: {Config.STORAGE_ROOT}\n")
    print(f"✨ Open http://{args.host}:{args.port} in your browser\n")

    app.run(host=args.host, port=args.port, debug=args.debug, threaded=True)
