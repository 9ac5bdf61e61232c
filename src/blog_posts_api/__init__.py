"""Blog posts CRUD API with paginated search."""
