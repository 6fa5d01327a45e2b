"""Database models package for SimpleCards."""

from ..core.extensions import db

from .module import Card, Module
from .user import User

__all__ = [
    'db',
    'Card',
    'Module',
    'User',
]
