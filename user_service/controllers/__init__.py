"""Controllers for the user service API."""
