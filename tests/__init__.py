"""
Test suite for the Clinic Appointment API.

Contains unit tests for the scheduling engine and API tests for the routes.
"""
import os

# Set environment for testing
os.environ["TESTING"] = "1"
