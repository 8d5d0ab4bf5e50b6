"""Persistencia clave-valor en un fichero `.env` de usuario.

Por qué un `.env` y no un keyring:
- Sin dependencias nativas; funciona igual en Linux/macOS/Windows.
- El usuario puede inspeccionarlo o borrarlo a mano.

Formato: `CLAVE=valor` por línea, con comentario de cabecera y claves
ordenadas. Al leer se ignoran líneas vacías, comentarios y líneas sin `=`.
"""

from __future__ import annotations

from pathlib import Path

from core.interfaces.storage import KeyValueStore


_HEADER = "# sintaxis-ngle credentials (.env)"


def parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


class EnvFileStore(KeyValueStore):
    """`KeyValueStore` respaldado por un fichero `.env`."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        return parse_env_lines(self._path.read_text(encoding="utf-8"))

    def _write(self, values: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        lines = [_HEADER]
        for key in sorted(values.keys()):
            lines.append(f"{key}={values[key]}")
        self._path.write_text("\n".join(lines) + "\n", encoding="utf-8")

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        values = self._read()
        values[key] = value
        self._write(values)

    def delete(self, key: str) -> None:
        values = self._read()
        if key not in values:
            return
        del values[key]
        self._write(values)


class MemoryStore(KeyValueStore):
    """Almacén efímero (sesiones sin persistencia y tests)."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)
