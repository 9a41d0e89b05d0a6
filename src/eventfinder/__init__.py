"""AI event finder: web search for events and iCalendar export."""

__version__ = "1.0.0"
