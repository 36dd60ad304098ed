"""
Clinic Appointment API

A FastAPI-based backend for booking medical appointments: users, doctors,
doctor schedules and appointments, with slot availability and conflict checks.
"""

__version__ = "1.0.0"
