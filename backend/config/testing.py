"""Testing configuration."""
from datetime import timedelta

class TestingConfig:
    """Testing configuration class."""
    
    # Basic Flask config
    DEBUG = False
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    
    # Database (in-memory SQLite for testing)
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = False
    
    # JWT Configuration
    JWT_SECRET_KEY = 'test-jwt-secret-with-enough-length-for-hs256'
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=5)
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(hours=1)
    
    # CORS
    CORS_ORIGINS = ["*"]
    
    # Rate Limiting (disabled for testing)
    RATELIMIT_STORAGE_URI = 'memory://'
    RATELIMIT_ENABLED = False
    
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
    LOG_LEVEL = 'WARNING'
