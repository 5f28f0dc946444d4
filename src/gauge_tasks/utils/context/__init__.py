"""
This module defines helping utilities for working with context.

"""

# relative
from .context import Context, ContextFactory, ScopedContext
from .models import ContextReporter, Label, LogEntry, LogLevel
from .reporter import *
