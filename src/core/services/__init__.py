"""Servicios del Core: validación, reintentos, credenciales e interacción."""
