"""exif-photo-sort: date and sequence aware photo copy planner."""

__version__ = "0.3.0"
