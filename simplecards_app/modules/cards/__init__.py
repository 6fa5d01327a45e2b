# File: simplecards_app/modules/cards/__init__.py
from flask import Blueprint

cards_bp = Blueprint('cards', __name__)
