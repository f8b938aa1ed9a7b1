"""MedAdmin - administrative approval workflow for the MedBookings platform."""

__version__ = "0.3.0"
