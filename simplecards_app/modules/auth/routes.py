# File: simplecards_app/modules/auth/routes.py
from flask_login import login_required, login_user, logout_user

from . import auth_bp
from .services import AuthService
from ...core.error_handlers import success_response
from ...schemas import AuthRequest
from ...utils.request_parsing import parse_json_body


@auth_bp.route('/register', methods=['POST'])
def register():
    req = parse_json_body(AuthRequest)
    user = AuthService.register_user(req.login, req.password)
    login_user(user)
    return success_response(data=user.to_dict())


@auth_bp.route('/login', methods=['POST'])
def login():
    req = parse_json_body(AuthRequest)
    user = AuthService.verify_user(req.login, req.password)
    login_user(user)
    return success_response(data=user.to_dict())


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    logout_user()
    return success_response(message='Logged out')
