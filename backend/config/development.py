"""Development configuration."""
import os
from datetime import timedelta

class DevelopmentConfig:
    """Development configuration class."""
    
    # Basic Flask config
    DEBUG = True
    TESTING = False
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    
    # Database
    SQLALCHEMY_DATABASE_URI = os.getenv('DEV_DATABASE_URL', 'sqlite:///qr_attendance_dev.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = False
    
    # JWT Configuration
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'jwt-secret-key-change-in-production')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=2)
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=7)
    
    # CORS
    CORS_ORIGINS = [r"^http://(localhost|127\.0\.0\.1)(:\d+)?$"]
    
    # Rate Limiting (in-memory unless Redis is configured)
    RATELIMIT_STORAGE_URI = os.getenv('REDIS_URL', 'memory://')
    RATELIMIT_ENABLED = True
    
    # Geofencing
    DEFAULT_GEOFENCE_RADIUS_METERS = 100
    
    # Device geolocation request (fresh, high-accuracy fix)
    GEOLOCATION_HIGH_ACCURACY = True
    GEOLOCATION_TIMEOUT_SECONDS = 10
    GEOLOCATION_MAXIMUM_AGE_SECONDS = 0
    # Allowed drift between device and server clocks on the fix timestamp
    GEOLOCATION_CLOCK_SKEW_SECONDS = 30
    
    # Pagination
    DEFAULT_PAGE_SIZE = 20
    MAX_PAGE_SIZE = 100
    
    # Logging
    LOG_LEVEL = 'DEBUG'
    LOG_FILE = 'logs/app.log'
