# File: simplecards_app/modules/card_modules/__init__.py
from flask import Blueprint

modules_bp = Blueprint('card_modules', __name__)
