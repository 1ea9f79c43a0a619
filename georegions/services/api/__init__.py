"""
REST API пользователей и регионов.
"""
