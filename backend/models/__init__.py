from models.user import User
from models.category import Category
from models.course import Course
from models.quiz import Quiz, QuizQuestion, QuizAttempt

__all__ = ["User", "Category", "Course", "Quiz", "QuizQuestion", "QuizAttempt"]
