"""Academia - record management API for academic semesters and registrations."""

__version__ = "0.1.0"
