# ftl_backend/run.py
import errno
import os
import socket
import sys

from . import create_app
from .models.base import db


def check_port_available(host, port):
    """Raises OSError (EADDRINUSE) when another process already listens on host:port."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
        sock.listen(1)


def main():
    app = None
    port = os.environ.get('PORT', 5000)
    try:
        app = create_app(os.environ.get('NODE_ENV') or os.environ.get('FLASK_ENV'))
        with app.app_context():
            db.create_all()
        port = app.config['PORT']
        host = os.environ.get('HOST', '0.0.0.0')
        # The development server exits on its own when the bind fails, so check first.
        check_port_available(host, port)
        app.logger.info(f"{app.config['SERVER_NAME_LABEL']} listening on {host}:{port} ({app.config['ENV_NAME']})")
        app.run(host=host, port=port, debug=app.config.get('DEBUG', False), use_reloader=False)
    except OSError as e:
        if e.errno == errno.EADDRINUSE:
            log_fatal(app, f"Port {port} is already in use.")
            log_fatal(app, f"Stop the process using port {port} or start the server with a different PORT environment variable.")
        else:
            log_fatal(app, f"Failed to start server: {e}")
        sys.exit(1)
    except Exception as e:
        log_fatal(app, f"Failed to start server: {e}")
        sys.exit(1)


def log_fatal(app, message):
    if app is not None:
        app.logger.critical(message)
    else:
        print(message, file=sys.stderr)


if __name__ == '__main__':
    main()
