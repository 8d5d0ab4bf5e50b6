"""Adaptadores de infraestructura (SDK del modelo, persistencia, exportación)."""
