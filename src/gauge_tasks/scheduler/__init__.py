# relative
from .graph import TaskGraph, TaskRunner
from .models import Task, TaskAction
