from course_catalog.routes import courses, subtitles

__all__ = ["courses", "subtitles"]
