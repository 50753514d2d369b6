"""Student Management System API: authentication, authorization and account management."""

__version__ = "0.1.0"
