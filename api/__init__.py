"""api/ -- FastAPI app, middleware, lifespan, and the JSON health endpoint.

Layer rule: api/ may import from auth/ and core/, never from web/.
"""
