# Middleware package init
"""
Catalog API: Middleware Package
=================================

Request -> [Request ID] -> [Access Log] -> [CORS] -> route handler

Starlette runs middleware in reverse order of registration, so create_app()
adds CORS first and RequestIDMiddleware last. The access log line then
carries the id assigned for the same request.
"""
