"""
HTTP routers, one module per route group, mounted under /api
"""
