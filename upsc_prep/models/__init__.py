"""Request body schemas"""
