"""Domain layer: business rules that do not touch the database."""
