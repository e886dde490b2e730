"""HTTP route blueprints. No business logic here."""
