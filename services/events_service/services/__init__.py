"""Events Service business logic package."""
