"""Configuration management using environment variables.

This module provides centralized configuration management using python-decouple
to read from .env files and environment variables.
"""

from decouple import config


class Config:
    """Base configuration class."""

    # Database
    DATABASE_URL: str = config('DATABASE_URL', default='sqlite:///ems.db')

    # Application
    SECRET_KEY: str = config('SECRET_KEY', default='dev-secret-key-change-in-production')

    # JWT signing secret, must be at least 32 bytes for HS256
    JWT_SECRET_KEY: str = config(
        'JWT_SECRET_KEY',
        default='dev-jwt-secret-change-in-production-0123456789',
    )
    JWT_ALGORITHM: str = config('JWT_ALGORITHM', default='HS256')
    # Token lifetimes in milliseconds
    JWT_ACCESS_TOKEN_EXPIRATION: int = config('JWT_ACCESS_TOKEN_EXPIRATION', default=45 * 60 * 1000, cast=int)
    JWT_REFRESH_TOKEN_EXPIRATION: int = config('JWT_REFRESH_TOKEN_EXPIRATION', default=7 * 24 * 60 * 60 * 1000, cast=int)

    BCRYPT_ROUNDS: int = config('BCRYPT_ROUNDS', default=12, cast=int)

    # Environment
    DEBUG: bool = config('DEBUG', default=False, cast=bool)
    ENVIRONMENT: str = config('ENVIRONMENT', default='development')

    # Security
    AUTH_RATE_LIMIT: str = config('AUTH_RATE_LIMIT', default='10 per minute')
    RATELIMIT_STORAGE_URI: str = config('RATELIMIT_STORAGE_URI', default='memory://')

    # Logging
    LOG_LEVEL: str = config('LOG_LEVEL', default='INFO')

    # Seed superadmin
    SUPERADMIN_EMAIL: str = config('SUPERADMIN_EMAIL', default='superadmin@ems.com')
    SUPERADMIN_PASSWORD: str = config('SUPERADMIN_PASSWORD', default='ChangeMe123!')


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    LOG_LEVEL = 'WARNING'


class TestingConfig(Config):
    """Testing configuration."""
    DATABASE_URL = 'sqlite://'
    BCRYPT_ROUNDS = 4
    DEBUG = True


def get_config() -> Config:
    """Get configuration based on environment."""
    env = config('ENVIRONMENT', default='development')

    if env == 'production':
        return ProductionConfig()
    elif env == 'testing':
        return TestingConfig()
    else:
        return DevelopmentConfig()


# Global config instance
settings = get_config()
