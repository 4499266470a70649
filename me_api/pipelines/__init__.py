"""Read-side pipelines that sit between the routers and the database."""
