"""Members Service business logic package."""
