"""Custom decorators for authorization."""
from functools import wraps
from flask_jwt_extended import get_jwt_identity
from app import db
from app.models.user import User
from app.utils.helpers import error_response

def student_required(f):
    """Decorator to require student role."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        current_user_id = get_jwt_identity()
        user = db.session.get(User, current_user_id)
        
        if not user:
            return error_response("User not found", 404)
        
        if not user.is_student():
            return error_response("Student access required", 403)
        
        return f(*args, **kwargs)
    return decorated_function
