"""Production configuration."""
import os
from datetime import timedelta

class ProductionConfig:
    """Production configuration class."""
    
    # Basic Flask config
    DEBUG = False
    TESTING = False
    SECRET_KEY = os.getenv('SECRET_KEY')  # Must be set in production
    
    # Database
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = False
    
    # JWT Configuration
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=1)
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=7)
    
    # CORS (comma-separated exact origins; no cross-origin access when unset)
    CORS_ORIGINS = [
        origin.strip() for origin in os.getenv('CORS_ORIGINS', '').split(',') if origin.strip()
    ]
    
    # Rate Limiting (Redis required in production)
    RATELIMIT_STORAGE_URI = os.getenv('REDIS_URL')
    RATELIMIT_ENABLED = True
    RATELIMIT_DEFAULT = "50/hour"
    
    # Enhanced security
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    
    # Geofencing
    DEFAULT_GEOFENCE_RADIUS_METERS = 100
    
    # Device geolocation request
    GEOLOCATION_HIGH_ACCURACY = True
    GEOLOCATION_TIMEOUT_SECONDS = 10
    GEOLOCATION_MAXIMUM_AGE_SECONDS = 0
    # Allowed drift between device and server clocks on the fix timestamp
    GEOLOCATION_CLOCK_SKEW_SECONDS = 30
    
    # Pagination
    DEFAULT_PAGE_SIZE = 20
    MAX_PAGE_SIZE = 100
    
    # Logging
    LOG_LEVEL = 'INFO'
    LOG_FILE = '/app/logs/app.log'
