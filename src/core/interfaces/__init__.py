"""Contratos del Core (Protocol).

- `PageFetcher`: cualquier corrutina que devuelva una página de un recurso.
- `TokenStore`: dónde vive el bearer token de la sesión.

Los adaptadores (httpx, fichero de sesión) los implementan; los servicios
solo dependen de estos contratos.
"""
