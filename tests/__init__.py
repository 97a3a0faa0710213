"""
Test suite for the Clinic Scheduling Service.

Contains unit tests for the availability rules and integration tests for the
services and HTTP API.
"""
import os

# Set environment for testing
os.environ["TESTING"] = "1"
