# Routes package init
"""
Catalog API: Route Handlers
=============================

    categories.py  /categories, /categories/{id}
    products.py    /products, /products/{id}
    health.py      /health
    deps.py        shared dependencies (services, id parsing, body decoding)

Handlers stay thin: parse input, call a service, wrap the result in the
response envelope. Errors propagate as CatalogError subclasses and are
rendered by the handlers registered in catalog.main.
"""
