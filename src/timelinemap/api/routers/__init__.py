"""HTTP routers: events, geocoding suggestions, timeline view."""
