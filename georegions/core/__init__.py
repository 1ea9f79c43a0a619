"""Доменная логика: пользователи, регионы, геокодирование."""
