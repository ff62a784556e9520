"""
Personal task tracking for Qalam CLI.
"""
from qalam.tasks.queue import Priority, Task, TaskQueue, detect_priority, parse_priority, task_queue

__all__ = ['Priority', 'Task', 'TaskQueue', 'detect_priority', 'parse_priority', 'task_queue']
