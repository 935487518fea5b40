"""Конфигурация проекта Menuscan."""
