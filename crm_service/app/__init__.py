"""HTTP application layer: factory, lifespan, routers, middleware."""
