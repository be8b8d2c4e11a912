"""
Services module containing the business logic behind each route group
"""
