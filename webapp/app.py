"""
Main Application File

Creates the Flask application and runs the development server with the
host, port and debug settings from the environment.
"""

from src.config import ConfigManager
from utils.logger import logger
from webapp.app_factory import create_app


def main():
    """Main application entry point."""
    try:
        return create_app()
    except Exception as e:
        logger.error(f"Failed to start application: {e}")
        raise


# Create application instance
app = main()

if __name__ == "__main__":
    settings = ConfigManager().config

    logger.info(f"Starting server on {settings.host}:{settings.port} (debug={settings.debug})")

    app.run(host=settings.host, port=settings.port, debug=settings.debug, use_reloader=False, threaded=True)
