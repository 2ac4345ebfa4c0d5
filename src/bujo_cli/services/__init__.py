"""Service layer: view resolution, migrations, bucketing and task operations."""
