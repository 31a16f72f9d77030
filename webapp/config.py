"""
Flask configuration classes for the Exam Paper Builder web application.

Application settings (API keys, limits, paper defaults) live in
``src.config.ConfigManager``; these classes only carry Flask settings.
"""

import os


class Config:
    """Base configuration class"""

    # Application settings
    APP_NAME = 'Exam Paper Builder'
    APP_VERSION = '1.0.0'

    # Session settings
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    PERMANENT_SESSION_LIFETIME = 7200  # 2 hours

    # Upload slack on top of the per-image limit, for multipart overhead
    UPLOAD_OVERHEAD_BYTES = 1024 * 1024

    @staticmethod
    def init_app(app, settings):
        """Initialize application with this configuration"""
        app.config['MAX_CONTENT_LENGTH'] = (
            settings.max_images * settings.max_file_size_mb * 1024 * 1024
            + Config.UPLOAD_OVERHEAD_BYTES
        )


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False

    SEND_FILE_MAX_AGE_DEFAULT = 0  # Disable caching in development


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False

    SESSION_COOKIE_SECURE = True

    # Security headers
    SECURITY_HEADERS = {
        'X-Content-Type-Options': 'nosniff',
        'X-Frame-Options': 'DENY',
    }


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    DEBUG = True


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def get_config(config_name=None):
    """Get configuration by name, falling back to FLASK_ENV"""
    env = config_name or os.environ.get('FLASK_ENV', 'development')
    return config.get(env, config['default'])
