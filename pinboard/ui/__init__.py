"""Server-rendered pages and their shared components."""
from .template_helpers import render_template, templates, time_ago

__all__ = ["render_template", "templates", "time_ago"]
