"""Dominio de la consola de administración.

Registros del backend (usuarios, astrólogos, quejas, horóscopos...),
peticiones/resultados paginados y la jerarquía de errores. Sin I/O.
"""
