"""
Infrastructure Layer
Persistence repositories and external clients
"""
