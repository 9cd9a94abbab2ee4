"""web/ -- Server-rendered HTML routes, templates, static assets, and error pages.

Layer rule: web/ may import from auth/ and core/, never from api/.
"""
