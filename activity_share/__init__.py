"""
Activity Share: package learning activities for sharing outside a course.
"""
__version__ = "0.1.0"
