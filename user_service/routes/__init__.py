"""Route blueprints for the user service."""
