# Services package init
"""
Catalog API: Business Logic Layer
===================================

    category_service.py  CategoryService: input rules, then the repository
    product_service.py   ProductService: input rules, category filter, repository
    validation.py        shared field checks (name, price, stock)

Services know nothing about HTTP or about which store backend is active;
they receive an abstract repository at construction time.
"""
