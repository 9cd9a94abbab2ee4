"""core/ -- Kernel layer: configuration. Imports nothing from api/, auth/, or web/."""
