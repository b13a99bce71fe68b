"""Endpoints operativos (salud y métricas)."""
