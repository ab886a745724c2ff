"""Communications Service business logic package."""
