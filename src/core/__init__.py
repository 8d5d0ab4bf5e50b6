"""Core: dominio, contratos, servicios y configuración (sin SDKs ni CLI)."""
