# File: simplecards_app/modules/health/__init__.py
from flask import Blueprint

health_bp = Blueprint('health', __name__)
