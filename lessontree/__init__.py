"""
LessonTree - Build-time tools for card-based course content

Walks a fixed unit/lesson/tab/card folder tree and writes a JSON
manifest (icons, backgrounds, media, captions) and a single master
HTML document for PDF export.
"""

__version__ = "1.0.0"
__author__ = "Dale Chapman"
__license__ = "MIT"
