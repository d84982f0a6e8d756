from app.models.user import User
from app.models.task import Task
