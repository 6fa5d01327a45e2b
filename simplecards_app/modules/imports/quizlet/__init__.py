from .models import QuizletCard
from .parser import QuizletParser

__all__ = ["QuizletCard", "QuizletParser"]
