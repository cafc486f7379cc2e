"""CampusPilot backend API."""
