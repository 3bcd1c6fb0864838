"""HTTP API: application factory, routers and response schemas."""
