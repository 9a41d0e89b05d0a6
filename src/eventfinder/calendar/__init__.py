"""Calendar file generation module."""

from .ics import ICS_MEDIA_TYPE, calendar_filename, generate_ics, make_uid

__all__ = ["ICS_MEDIA_TYPE", "calendar_filename", "generate_ics", "make_uid"]
