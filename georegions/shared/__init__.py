# georegions/shared/__init__.py
"""
Общие модели данных.
"""
