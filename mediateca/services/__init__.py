"""Servicios de dominio: rutas, nombres, carpetas y uploads."""
