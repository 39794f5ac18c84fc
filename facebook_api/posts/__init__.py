"""
Posts feature: entity, storage, business logic and HTTP routes.
"""
